"""Request/response schemas for user accounts."""

from datetime import datetime

from pydantic import BaseModel, Field

from meshctl.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    USERNAME_PATTERN,
)


class SuperAdminCreate(BaseModel):
    """Body of the first super-admin bootstrap call."""

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        pattern=USERNAME_PATTERN,
    )
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class UserCreate(BaseModel):
    """Body of POST /users/{username}; the username comes from the path."""

    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    is_admin: bool = False
    is_super_admin: bool = False


class UserUpdate(BaseModel):
    """
    Change set for PUT /users/{username}.

    Omitted (None) fields are left untouched; role flags count as changed only
    when they differ from the stored value.
    """

    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )
    is_admin: bool | None = None
    is_super_admin: bool | None = None


class UserResponse(BaseModel):
    """User as returned to API callers (no password hash)."""

    username: str
    is_admin: bool
    is_super_admin: bool
    remote_gw_ids: list[str] = Field(default_factory=list)
    origin: str
    promoted_at: datetime | None = None

    class Config:
        from_attributes = True
