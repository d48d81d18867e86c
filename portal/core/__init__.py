"""Core app configuration, database and security helpers."""

from portal.core.config import Settings, get_settings, settings
from portal.core.database import Database, get_db

__all__ = ["Database", "Settings", "get_settings", "settings", "get_db"]
