"""Auth dependencies (get_store, get_current_user, require_admin, require_self_or_admin)."""

from functools import lru_cache
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from meshctl.core.config import get_settings
from meshctl.core.database import SessionLocal, get_db
from meshctl.core.errors import ForbiddenError, NotFoundError
from meshctl.core.security import decode_access_token
from meshctl.models.user import User
from meshctl.services.cleanup import ExtClientCleanup
from meshctl.services.store import RecordStore

security = HTTPBearer(auto_error=False)


def get_store(db: Annotated[Session, Depends(get_db)]) -> RecordStore:
    """Dependency: record store bound to the request-scoped session."""
    return RecordStore(db)


@lru_cache
def get_ext_client_cleanup() -> ExtClientCleanup:
    """Process-wide cleanup worker pool (created on first use)."""
    return ExtClientCleanup(SessionLocal, max_workers=get_settings().CLEANUP_WORKERS)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    store: Annotated[RecordStore, Depends(get_store)],
) -> User:
    """
    Dependency: require valid Bearer JWT and return the calling user.
    Raises 401 if the token is missing or invalid, not-found if the user no longer exists.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = store.find_user(str(sub))
    if user is None:
        raise NotFoundError(f"user {sub} not found; session is stale")
    return user


def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Dependency: admin or super-admin caller."""
    if not current_user.is_elevated:
        raise ForbiddenError("admin access required")
    return current_user


def require_self_or_admin(
    username: str,
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Dependency: the caller is the {username} in the path, or an admin."""
    if current_user.username != username and not current_user.is_elevated:
        raise ForbiddenError("not authorized")
    return current_user


def require_self(
    username: str,
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    if current_user.username != username:
        raise ForbiddenError("not authorized")
    return current_user
