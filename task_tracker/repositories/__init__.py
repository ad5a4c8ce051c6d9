"""Repository layer for data access."""

from .base import BaseRepository
from .tag import TagRepository
from .task import TaskRepository

__all__ = [
    "BaseRepository",
    "TaskRepository",
    "TagRepository",
]
