"""
Create a user from the command line (e.g. the first super-admin on a fresh install).
Run from project root:
  python -m meshctl.scripts.create_user USERNAME PASSWORD [role]
Example:
  python -m meshctl.scripts.create_user root your-secure-password superadmin
"""
import argparse
import sys

from meshctl.core.config import get_settings
from meshctl.core.database import session_scope
from meshctl.core.errors import BadRequestError, MeshError
from meshctl.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
)
from meshctl.models.user import User
from meshctl.schemas.user import SuperAdminCreate
from meshctl.services.store import RecordStore
from meshctl.services.superadmin import create_superadmin
from meshctl.services.users import validate_username


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a meshctl user.")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin", "superadmin"])
    args = parser.parse_args()

    username = args.username.strip()
    if not USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN:
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    with session_scope() as db:
        try:
            _create(RecordStore(db), username, args.password, args.role)
        except MeshError as e:
            print(e.message, file=sys.stderr)
            return 1
    print(f"Created user '{username}' with role '{args.role}'.")
    return 0


def _create(store: RecordStore, username: str, password: str, role: str) -> None:
    if role == "superadmin":
        create_superadmin(store, SuperAdminCreate(username=username, password=password), get_settings())
        return
    validate_username(username)
    if store.find_user(username) is not None:
        raise BadRequestError(f"user '{username}' already exists")
    store.upsert_user(
        User(
            username=username,
            password_hash=hash_password(password),
            is_admin=role == "admin",
            is_super_admin=False,
            remote_gw_ids=[],
        )
    )


if __name__ == "__main__":
    sys.exit(main())
