"""Core app configuration, database, errors and security."""

from meshctl.core.config import get_settings, settings
from meshctl.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
