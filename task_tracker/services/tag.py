"""Tag service with business logic."""

from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import storage_errors
from ..models import Tag
from ..repositories import TagRepository


def normalize_tag_names(names: Iterable[str] | None) -> list[str]:
    """
    Clean a caller-supplied tag list.

    - surrounding whitespace is stripped
    - empty names are dropped
    - duplicates collapse, the first occurrence keeps its position

    Case is preserved: "Home" and "home" are different tags.

    Example:
        normalize_tag_names([" errand", "shopping", "", "errand"])
        -> ["errand", "shopping"]
    """
    if not names:
        return []

    # dict keeps insertion order, so this is an ordered set
    return list(dict.fromkeys(name.strip() for name in names if name and name.strip()))


class TagService:
    """
    Service for tags.

    Tags have no lifecycle of their own: they appear through find-or-create
    when a task references them and are never deleted, even when the last
    task using them lets go.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tag_repo = TagRepository(db)

    async def list_tags(self) -> list[Tag]:
        """All known tags, alphabetically (including tags no task uses anymore)."""
        async with storage_errors("Tag listing failed"):
            return await self.tag_repo.get_all()
