"""JWT access tokens.

Sessions are owned by the main GAC application; this service only verifies
the tokens it hands out. ``create_access_token`` exists for the CLI and for
tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from gac.logging_config import get_logger
from gac.settings import settings

logger = get_logger(__name__)

JWT_ALGORITHM = "HS256"


def create_access_token(
    subject: str,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create JWT access token.

    Args:
        subject: User name the token is issued to
        role: One of admin, staff, user
        expires_delta: Optional expiration time

    Returns:
        JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.jwt_expire_hours)

    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "role": role,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Verify and decode JWT token.

    Args:
        token: JWT token string

    Returns:
        Token payload or None if invalid or expired
    """
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.debug("token_verification_failed", error=str(e))
        return None
