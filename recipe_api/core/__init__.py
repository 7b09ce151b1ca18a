"""Core app configuration, database, and error handling."""

from recipe_api.core.config import get_settings, settings
from recipe_api.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
