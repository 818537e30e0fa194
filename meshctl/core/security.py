"""Credential checks for users and legacy nodes, and the bearer tokens issued at login."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from meshctl.core.config import settings

BCRYPT_ROUNDS = 12
# bcrypt ignores input past 72 bytes.
_BCRYPT_MAX_BYTES = 72

USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 40
USERNAME_PATTERN = r"^[A-Za-z0-9._@-]+$"
PASSWORD_MIN_LEN = 5
PASSWORD_MAX_LEN = 128


def _secret_bytes(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    return bcrypt.hashpw(_secret_bytes(plain_password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Check a password against a stored bcrypt hash. The cost factor is read from
    the hash, so legacy node hashes of any cost verify. A malformed or empty
    hash never matches.
    """
    try:
        return bcrypt.checkpw(_secret_bytes(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def role_name(is_admin: bool, is_super_admin: bool) -> str:
    if is_super_admin:
        return "superadmin"
    if is_admin:
        return "admin"
    return "user"


def create_access_token(sub: str, role: str) -> str:
    """Signed token naming the user and the role held at login; lifetime is JWT_EXPIRE_MINUTES."""
    issued = datetime.now(UTC)
    claims: dict[str, Any] = {
        "sub": str(sub),
        "role": role,
        "iat": issued,
        "exp": issued + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    }
    return jwt.encode(claims, settings.JWT_SECRET.get_secret_value(), algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Claims of a valid token. Raises jwt.PyJWTError when the signature or expiry check fails."""
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
    )
