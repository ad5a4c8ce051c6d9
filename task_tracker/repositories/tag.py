"""Tag repository with find-or-create semantics."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..models import Tag
from .base import BaseRepository

logger = get_logger(__name__)


class TagRepository(BaseRepository[Tag]):
    """
    Repository for tags.

    Tags are never created directly by callers: every tag name that a task
    references goes through get_or_create_many. The unique constraint on
    tags.name is the single authority on uniqueness.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Tag, db)

    async def get_by_name(self, name: str) -> Tag | None:
        """
        Fetch a tag by its exact name.

        SQL equivalent:
            SELECT * FROM tags WHERE name = {name};
        """
        result = await self.db.execute(select(Tag).where(Tag.name == name))
        return result.scalar_one_or_none()

    async def get_all(self) -> list[Tag]:
        """All tags, alphabetically."""
        result = await self.db.execute(select(Tag).order_by(Tag.name))
        return list(result.scalars().all())

    async def get_by_names(self, names: list[str]) -> list[Tag]:
        """
        Fetch the tags whose name is in `names` (missing names are skipped).

        SQL equivalent:
            SELECT * FROM tags WHERE name IN ({names});
        """
        result = await self.db.execute(select(Tag).where(Tag.name.in_(names)))
        return list(result.scalars().all())

    async def get_or_create_many(self, names: list[str]) -> list[Tag]:
        """
        Find-or-create for a list of distinct names.

        Existing tags are fetched with a single IN query, only the missing
        names are inserted. The result follows the order of `names`.
        """
        if not names:
            return []

        by_name = {tag.name: tag for tag in await self.get_by_names(names)}

        for name in names:
            if name not in by_name:
                by_name[name] = await self._insert_or_fetch(name)

        return [by_name[name] for name in names]

    async def _insert_or_fetch(self, name: str) -> Tag:
        # The INSERT runs inside a SAVEPOINT so that losing the race to a
        # concurrent request rolls back only this statement, not the caller's
        # transaction. The loser re-reads the row the winner committed.
        try:
            async with self.db.begin_nested():
                tag = Tag(name=name)
                self.db.add(tag)
                await self.db.flush()
        except IntegrityError:
            tag = await self.get_by_name(name)
            if tag is None:
                # Not a duplicate name: some other constraint failed
                raise
            logger.info("Tag created concurrently, reusing it", extra={"tag": name})
            return tag

        return tag
