import logging

from fastapi import APIRouter, Depends, HTTPException, status

from topic_portal.core.config import settings
from topic_portal.core.security import authenticate_admin, create_access_token, get_current_admin
from topic_portal.schemas.auth import AdminIdentity, LoginRequest, TokenResponse
from topic_portal.schemas.response import StandardResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=StandardResponse[TokenResponse])
def login(credentials: LoginRequest):
    """
    Exchange the admin username and password for a signed, expiring access token
    """
    if not authenticate_admin(credentials.username, credentials.password):
        logger.warning("Failed admin login for %r", credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    token = create_access_token(credentials.username)
    logger.info("Admin %s logged in", credentials.username)
    return StandardResponse(
        message="Login successful",
        data=TokenResponse(
            access_token=token,
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        ),
    )


@router.get("/me", response_model=StandardResponse[AdminIdentity])
def read_current_admin(username: str = Depends(get_current_admin)):
    return StandardResponse(data=AdminIdentity(username=username))
