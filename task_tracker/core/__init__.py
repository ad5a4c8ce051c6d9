"""Core application components."""

from .config import Settings, settings
from .database import AsyncSessionLocal, engine, init_db, register_sqlite_functions
from .exceptions import NotFoundError, StorageError, TaskTrackerError, ValidationError

__all__ = [
    "settings",
    "Settings",
    "engine",
    "AsyncSessionLocal",
    "init_db",
    "register_sqlite_functions",
    "TaskTrackerError",
    "ValidationError",
    "NotFoundError",
    "StorageError",
]
