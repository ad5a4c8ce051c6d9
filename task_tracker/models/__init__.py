"""SQLAlchemy models for Task Tracker."""

from .base import Base, TimestampMixin
from .tag import Tag
from .task import Task, TaskStatus
from .task_tag import task_tags

__all__ = [
    "Base",
    "TimestampMixin",
    "Tag",
    "Task",
    "TaskStatus",
    "task_tags",
]
