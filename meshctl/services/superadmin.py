"""
Super-admin lifecycle: first-user bootstrap, role transfer, and reconciliation.

The super-admin is a singleton. system_state.superadmin_username names the
holder and is only written in the same transaction as the user rows, so a
transfer either fully happens or not at all. reconcile_superadmins repairs
stores that were written outside these paths (older tooling, manual edits).
"""

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from meshctl.core.errors import BadRequestError, ForbiddenError
from meshctl.core.security import hash_password
from meshctl.models.user import ORIGIN_LOCAL, User
from meshctl.services.store import RecordStore

if TYPE_CHECKING:
    from meshctl.core.config import Settings
    from meshctl.schemas.user import SuperAdminCreate

logger = logging.getLogger(__name__)


def _require_basic_auth(settings: "Settings") -> None:
    if not settings.BASIC_AUTH_ENABLED:
        raise BadRequestError("basic auth is disabled")


def has_superadmin(store: RecordStore) -> bool:
    """True once the first super-admin has been created."""
    state = store.find_state()
    if state is not None and state.superadmin_username:
        return True
    return bool(store.list_superadmins())


def create_superadmin(
    store: RecordStore,
    body: "SuperAdminCreate",
    settings: "Settings",
) -> User:
    """Create the first super-admin. Fails once any super-admin exists."""
    _require_basic_auth(settings)
    state = store.get_state(for_update=True)
    if state.superadmin_username or store.list_superadmins():
        store.rollback()
        raise BadRequestError("superadmin user already exists")
    if store.find_user(body.username) is not None:
        store.rollback()
        raise BadRequestError(f"user {body.username} already exists")

    user = User(
        username=body.username,
        password_hash=hash_password(body.password),
        is_admin=False,
        is_super_admin=True,
        remote_gw_ids=[],
        origin=ORIGIN_LOCAL,
        promoted_at=datetime.now(UTC),
    )
    store.session.add(user)
    state.superadmin_username = user.username
    store.commit(f"create superadmin {user.username}")
    logger.info("User was made a super admin", extra={"user": user.username})
    return user


def transfer_superadmin(
    store: RecordStore,
    caller: User,
    target_username: str,
    settings: "Settings",
) -> User:
    """
    Hand the super-admin role from caller to an admin target.

    Target becomes super-admin (admin flag cleared), caller is demoted to admin,
    and the singleton record is updated. All three rows are committed together;
    on failure the transaction is rolled back and InternalError is raised.
    """
    if not caller.is_super_admin:
        raise ForbiddenError("only superadmin can assign the superadmin role to another user")
    target = store.get_user(target_username)
    if target.is_super_admin or not target.is_admin:
        raise ForbiddenError("only admins can be promoted to superadmin role")
    _require_basic_auth(settings)

    state = store.get_state(for_update=True)
    caller.is_super_admin = False
    caller.is_admin = True
    # Flush the demotion first so no statement ever observes two super-admins.
    store.flush(f"demote superadmin {caller.username}")
    target.is_super_admin = True
    target.is_admin = False
    target.promoted_at = datetime.now(UTC)
    state.superadmin_username = target.username
    store.commit(f"transfer superadmin from {caller.username} to {target.username}")

    logger.info(
        "Superadmin role transferred",
        extra={"from_user": caller.username, "to_user": target.username},
    )
    return target


def _promotion_key(user: User) -> tuple[bool, datetime]:
    promoted = user.promoted_at
    if promoted is not None and promoted.tzinfo is None:
        promoted = promoted.replace(tzinfo=UTC)
    return (promoted is not None, promoted or datetime.min.replace(tzinfo=UTC))


def reconcile_superadmins(store: RecordStore) -> list[str]:
    """
    Enforce the singleton invariant. Keeps the user named by the singleton
    record when it is flagged, otherwise the most recently promoted flagged
    user, and demotes every other flagged user to admin.

    Returns the demoted usernames. Idempotent.
    """
    state = store.get_state(for_update=True)
    flagged = store.list_superadmins()

    if not flagged:
        named = store.find_user(state.superadmin_username) if state.superadmin_username else None
        if named is not None:
            logger.warning(
                "Superadmin flag missing; restoring from system state",
                extra={"user": named.username},
            )
            named.is_super_admin = True
            named.is_admin = False
        elif state.superadmin_username:
            logger.warning(
                "System state names a missing superadmin; clearing",
                extra={"user": state.superadmin_username},
            )
            state.superadmin_username = None
        store.commit("reconcile superadmin")
        return []

    keep = next((u for u in flagged if u.username == state.superadmin_username), None)
    if keep is None:
        keep = max(flagged, key=_promotion_key)

    demoted: list[str] = []
    for user in flagged:
        if user.username == keep.username:
            continue
        user.is_super_admin = False
        user.is_admin = True
        demoted.append(user.username)
    state.superadmin_username = keep.username
    store.commit("reconcile superadmin")

    if demoted:
        logger.warning(
            "Demoted extra superadmins",
            extra={"kept": keep.username, "demoted": ",".join(demoted)},
        )
    return demoted
