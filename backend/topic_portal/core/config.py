from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    """
    Application settings, loaded from environment variables or the .env file.

    Covers the HTTP server, database connection, admin credentials, token
    signing and export formatting. Every key has a default so the service
    starts with no configuration; production deployments are expected to
    override at least ADMIN_PASSWORD and JWT_SECRET_KEY.
    """
    # Server
    PROJECT_NAME: str = "Topic Submission Portal"
    API_PREFIX: str = "/api"
    BACKEND_PORT: int = 8000
    BACKEND_CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./topic_submissions.db"
    DATABASE_ECHO: bool = False

    # Admin gate
    ADMIN_USERNAME: str = "florence"
    ADMIN_PASSWORD: str = "admin"
    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Export
    REPORT_TIMEZONE: str = "UTC"

    # Model configuration tells Pydantic where to find the .env file.
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=True
    )

# Create a single, globally accessible instance of the settings.
settings = Settings()
