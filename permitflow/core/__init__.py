"""Core app configuration, database and security."""

from permitflow.core.config import get_settings, settings
from permitflow.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
