"""SQLAlchemy ORM models."""

from meshctl.models.base import Base
from meshctl.models.ext_client import ExtClient
from meshctl.models.host import Host
from meshctl.models.legacy_node import LegacyNodeRecord
from meshctl.models.node import Node
from meshctl.models.system import SystemState
from meshctl.models.user import User

__all__ = [
    "Base",
    "ExtClient",
    "Host",
    "LegacyNodeRecord",
    "Node",
    "SystemState",
    "User",
]
