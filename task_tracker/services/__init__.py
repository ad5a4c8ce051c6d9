"""Service layer with business logic."""

from .seed import seed_demo_data
from .tag import TagService, normalize_tag_names
from .task import TaskService

__all__ = [
    "TaskService",
    "TagService",
    "normalize_tag_names",
    "seed_demo_data",
]
