import hmac
import logging
from datetime import datetime, timedelta, UTC
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from topic_portal.core.config import settings

logger = logging.getLogger(__name__)

# Bearer token security; missing headers are reported as 401 below
security = HTTPBearer(auto_error=False)

TOKEN_TYPE_ACCESS = "access"


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def authenticate_admin(username: str, password: str) -> bool:
    """Constant-time comparison against the configured admin credentials."""
    username_ok = hmac.compare_digest(username.encode("utf-8"), settings.ADMIN_USERNAME.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8"))
    return username_ok and password_ok


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT access token for the admin dashboard"""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(UTC) + expires_delta
    to_encode = {"sub": subject, "exp": expire, "type": TOKEN_TYPE_ACCESS}
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and verify a JWT; expired or tampered tokens raise 401."""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise _credentials_exception()


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> str:
    """Resolve the admin username from the bearer token"""
    if credentials is None:
        raise _credentials_exception("Not authenticated")

    payload = decode_token(credentials.credentials)
    if payload.get("type") != TOKEN_TYPE_ACCESS:
        raise _credentials_exception("Invalid token type")

    username = payload.get("sub")
    if username != settings.ADMIN_USERNAME:
        logger.warning("Rejected token for unknown subject %r", username)
        raise _credentials_exception()
    return username
