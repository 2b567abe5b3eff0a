"""
JWT helpers for the administrative (write) side of the options API.

Tokens are issued by the platform's identity service; this module only needs
to mint them for tooling and tests, and to verify them on incoming requests.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from .config import get_settings
from .logging import get_logger

logger = get_logger(__name__)

WRITE_SCOPE = "options:write"


def create_access_token(
    subject: str,
    scopes: list[str] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed access token.

    Example:
        token = create_access_token("admin@ppa.example", scopes=[WRITE_SCOPE])
    """
    settings = get_settings()
    now = datetime.now(UTC)
    expire = now + (
        expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    )
    to_encode = {
        "sub": subject,
        "scope": " ".join(scopes or []),
        "exp": expire,
        "iat": now,
    }
    encoded_jwt = jwt.encode(
        to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm
    )
    logger.info("auth.token_created", sub=subject, expires_at=expire.isoformat())
    return encoded_jwt


def verify_token(token: str) -> dict[str, Any]:
    """
    Verify a JWT token and return the payload.

    Raises:
        JWTError: If token is invalid, expired, or missing the 'sub' claim
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError as e:
        logger.warning("auth.token_verification_failed", error=str(e))
        raise

    if payload.get("sub") is None:
        logger.warning("auth.token_missing_subject")
        raise JWTError("Token missing 'sub' claim")
    return payload


def has_scope(payload: dict[str, Any], scope: str) -> bool:
    return scope in str(payload.get("scope") or "").split()
