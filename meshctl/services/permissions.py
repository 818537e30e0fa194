"""
Role and permission rules for acting on user accounts.

Pure decision functions: they only read the caller, the target and the
requested change, and return a Decision. check_* wrappers raise
ForbiddenError for the HTTP and service layers.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from meshctl.core.errors import ForbiddenError

if TYPE_CHECKING:
    from meshctl.models.user import User
    from meshctl.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""

    @classmethod
    def allow(cls) -> "Decision":
        return cls(True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(False, reason)


def _changes_role(target: "User", change: "UserUpdate") -> bool:
    if change.is_admin is not None and change.is_admin != bool(target.is_admin):
        return True
    if change.is_super_admin is not None and change.is_super_admin != bool(target.is_super_admin):
        return True
    return False


def can_modify(caller: "User", target: "User", change: "UserUpdate") -> Decision:
    """Decide whether caller may apply change to target. Rules are evaluated in order; first deny wins."""
    self_update = caller.username == target.username
    caller_is_super = bool(caller.is_super_admin)

    if not caller_is_super and target.is_super_admin:
        return Decision.deny("cannot update superadmin user")
    if not caller_is_super and not self_update and not caller.is_admin:
        return Decision.deny("not authorized")
    if self_update and _changes_role(target, change):
        return Decision.deny("user not allowed to self assign role")
    if not caller_is_super and not self_update and caller.is_admin:
        if target.is_admin or change.is_admin:
            return Decision.deny("admin user cannot update another admin")
    if change.is_super_admin and not target.is_super_admin:
        return Decision.deny("superadmin role can only be transferred")
    if target.is_external:
        return Decision.deny(f"cannot update user info for oauth user {target.username}")
    return Decision.allow()


def can_create(caller: "User", new_user: "UserCreate") -> Decision:
    """Only a super-admin creates admins; nobody creates another super-admin."""
    if new_user.is_super_admin:
        return Decision.deny("additional superadmins cannot be created")
    if new_user.is_admin and not caller.is_super_admin:
        return Decision.deny("only superadmin can create admin users")
    if not caller.is_elevated:
        return Decision.deny("not authorized")
    return Decision.allow()


def can_delete(caller: "User", target: "User") -> Decision:
    if target.is_super_admin:
        return Decision.deny("superadmin cannot be deleted")
    if not caller.is_elevated:
        return Decision.deny("not authorized")
    if not caller.is_super_admin and target.is_admin:
        return Decision.deny("admin cannot delete another admin user")
    return Decision.allow()


def _enforce(decision: Decision, action: str, caller: "User", target_name: str) -> None:
    if decision.allowed:
        return
    logger.warning(
        "Permission denied",
        extra={
            "action": action,
            "caller": caller.username,
            "target": target_name,
            "reason": decision.reason,
        },
    )
    raise ForbiddenError(decision.reason)


def check_modify(caller: "User", target: "User", change: "UserUpdate") -> None:
    _enforce(can_modify(caller, target, change), "update", caller, target.username)


def check_create(caller: "User", username: str, new_user: "UserCreate") -> None:
    _enforce(can_create(caller, new_user), "create", caller, username)


def check_delete(caller: "User", target: "User") -> None:
    _enforce(can_delete(caller, target), "delete", caller, target.username)
