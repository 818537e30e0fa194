"""User account operations: authenticate, create, read, update, delete."""

import logging
import re
from typing import TYPE_CHECKING

from meshctl.core.errors import BadRequestError, UnauthorizedError
from meshctl.core.security import (
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    USERNAME_PATTERN,
    create_access_token,
    hash_password,
    role_name,
    verify_password,
)
from meshctl.models.user import ORIGIN_LOCAL, User
from meshctl.services.permissions import check_create, check_delete, check_modify
from meshctl.services.store import RecordStore

if TYPE_CHECKING:
    from meshctl.core.config import Settings
    from meshctl.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

_USERNAME_RE = re.compile(USERNAME_PATTERN)


def validate_username(username: str) -> None:
    if not USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN:
        raise BadRequestError(f"username must be {USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} characters")
    if not _USERNAME_RE.fullmatch(username):
        raise BadRequestError("username may contain only letters, digits and . _ @ -")


def authenticate(
    store: RecordStore,
    username: str,
    password: str,
    settings: "Settings",
) -> str:
    """Verify basic-auth credentials and return a signed access token."""
    if not settings.BASIC_AUTH_ENABLED:
        raise BadRequestError("basic auth is disabled")
    user = store.find_user(username)
    # Same message for every failure so usernames cannot be probed.
    if user is None or user.is_external or not verify_password(password, user.password_hash):
        logger.info("User validation failed", extra={"user": username})
        raise UnauthorizedError("invalid username or password")
    logger.debug("User was authenticated", extra={"user": username})
    return create_access_token(sub=user.username, role=role_name(user.is_admin, user.is_super_admin))


def create_user(
    store: RecordStore,
    caller: User,
    username: str,
    body: "UserCreate",
) -> User:
    validate_username(username)
    check_create(caller, username, body)
    if store.find_user(username) is not None:
        raise BadRequestError(f"user {username} already exists")
    user = User(
        username=username,
        password_hash=hash_password(body.password),
        is_admin=body.is_admin,
        is_super_admin=False,
        remote_gw_ids=[],
        origin=ORIGIN_LOCAL,
    )
    store.upsert_user(user)
    logger.info("User was created", extra={"user": username, "created_by": caller.username})
    return user


def update_user(
    store: RecordStore,
    caller: User,
    username: str,
    change: "UserUpdate",
) -> User:
    """Apply a change set after the permission engine has allowed it. The username itself never changes."""
    target = store.get_user(username)
    check_modify(caller, target, change)
    if change.password:
        target.password_hash = hash_password(change.password)
    if change.is_admin is not None:
        target.is_admin = change.is_admin
    store.upsert_user(target)
    logger.info("User was updated", extra={"user": username, "updated_by": caller.username})
    return target


def delete_user(store: RecordStore, caller: User, username: str) -> None:
    target = store.get_user(username)
    check_delete(caller, target)
    store.delete_user(username)
    logger.info("User was deleted", extra={"user": username, "deleted_by": caller.username})
