from collections.abc import Generator
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from ..core.auth import WRITE_SCOPE, has_scope, verify_token
from ..core.config import get_settings
from ..core.logging import get_logger
from ..db import get_sessionmaker
from ..models.catalog import OptionKind, get_option_kind
from ..services.options import OptionService

logger = get_logger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


def get_db_session() -> Generator[Session, None, None]:
    SessionLocal = get_sessionmaker()
    with SessionLocal() as session:
        yield session


def get_option_kind_param(kind: str) -> OptionKind:
    """Resolve the ``{kind}`` path segment; unknown kinds become 404 via the error handler."""
    return get_option_kind(kind)


def get_option_service(
    kind: OptionKind = Depends(get_option_kind_param),
    session: Session = Depends(get_db_session),
) -> OptionService:
    settings = get_settings()
    return OptionService(session, kind, max_batch_size=settings.max_bulk_items)


def require_writer(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Guard for mutating endpoints.

    Only enforced if AUTH_ENABLED=true; the token must carry the
    ``options:write`` scope.

    Raises:
        HTTPException: 401 for a missing/invalid token, 403 without the scope
    """
    settings = get_settings()

    if not settings.auth_enabled:
        return {"sub": "anonymous", "auth_disabled": True}

    if not credentials:
        logger.warning("auth.missing_credentials")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = verify_token(credentials.credentials)
    except JWTError as e:
        logger.warning("auth.invalid_token", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not has_scope(payload, WRITE_SCOPE):
        logger.warning("auth.missing_scope", sub=payload.get("sub"), scope=WRITE_SCOPE)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Token lacks the {WRITE_SCOPE} scope",
        )
    return payload
