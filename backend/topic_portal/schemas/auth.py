from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Admin login request

    Attributes:
        username: admin username
        password: admin password
    """
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")


class AdminIdentity(BaseModel):
    username: str
