"""Base repository with common CRUD operations."""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with CRUD operations for any model derived from Base.

    Repositories only flush; committing is the job of the request-scoped
    session (see api.dependencies.get_db).

    Usage:
        repo = BaseRepository[Tag](Tag, db_session)
        tag = await repo.get_by_id(1)
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    async def create(self, obj: ModelType) -> ModelType:
        """
        Insert a new row.

        Returns:
            The same object with its generated ID and defaults filled in
        """
        self.db.add(obj)
        await self.db.flush()  # send INSERT, no commit
        await self.db.refresh(obj)  # pull generated columns (id, timestamps)
        return obj

    async def get_by_id(self, id: int) -> ModelType | None:
        """
        Fetch one row by primary key.

        SQL equivalent:
            SELECT * FROM table WHERE id = {id};
        """
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def update(self, id: int, **kwargs: Any) -> ModelType | None:
        """
        Overwrite the given columns of a row.

        Every passed field is assigned, including None values, so callers
        decide between patch and full-replace semantics.

        Returns:
            Updated object, or None when the row does not exist
        """
        obj = await self.get_by_id(id)
        if not obj:
            return None

        for key, value in kwargs.items():
            if hasattr(obj, key):
                setattr(obj, key, value)

        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, id: int) -> bool:
        """
        Delete a row by primary key.

        Returns:
            True if a row was deleted, False if there was nothing to delete

        SQL equivalent:
            DELETE FROM table WHERE id = {id};
        """
        result = await self.db.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0

    async def count(self) -> int:
        """
        Count rows.

        SQL equivalent:
            SELECT COUNT(*) FROM table;
        """
        result = await self.db.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()
