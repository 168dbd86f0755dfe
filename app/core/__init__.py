"""Core app configuration, database and security."""

from app.core.config import Settings, get_settings
from app.core.database import create_db_engine, create_session_factory, get_db

__all__ = [
    "Settings",
    "create_db_engine",
    "create_session_factory",
    "get_db",
    "get_settings",
]
