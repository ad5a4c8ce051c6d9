"""Task repository with the search query."""

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models import Tag, Task, task_tags
from .base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """
    Repository for tasks.

    Includes:
    - Search by free text and tag, with tags eagerly loaded
    - Replacing the full tag set of a task
    - Deleting a task together with its tag associations
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Task, db)

    async def get_by_id_full(self, id: int) -> Task | None:
        """
        Fetch a task together with its tags (eager loading).

        Usage:
            task = await repo.get_by_id_full(1)
            print([tag.name for tag in task.tags])  # no extra query
        """
        result = await self.db.execute(
            select(Task).options(selectinload(Task.tags)).where(Task.id == id)
        )
        return result.scalar_one_or_none()

    async def search(self, q: str | None = None, tag: str | None = None) -> list[Task]:
        """
        Find tasks by free text and/or tag, each with its full tag list.

        Args:
            q: Case-insensitive substring of title, description or location
            tag: Exact name of a tag the task must carry

        Returns:
            Matching tasks ordered by due date (no date last), then by id

        Filters are combined with AND; an empty or None filter is ignored.
        The tag filter is an EXISTS subquery rather than a join, so a task
        that matches still comes back with all of its tags.

        Round-trips: the task rows come from one statement and selectinload
        fetches the tags of all of them in one more, so the cost does not
        grow with the number of tasks.

        SQL equivalent:
            SELECT tasks.* FROM tasks
            WHERE (lower(title) LIKE lower('%q%')
                   OR lower(description) LIKE lower('%q%')
                   OR lower(location) LIKE lower('%q%'))
              AND EXISTS (SELECT 1 FROM task_tags JOIN tags ON ...
                          WHERE task_tags.task_id = tasks.id AND tags.name = {tag})
            ORDER BY due_date ASC NULLS LAST, id ASC;

            SELECT tasks_1.id, tags.* FROM tasks AS tasks_1
            JOIN task_tags ... JOIN tags ...
            WHERE tasks_1.id IN ({ids of the rows above});
        """
        query = select(Task).options(selectinload(Task.tags))

        conditions = []

        if q:
            # autoescape: "%" and "_" in the search term match literally
            conditions.append(
                or_(
                    Task.title.icontains(q, autoescape=True),
                    Task.description.icontains(q, autoescape=True),
                    Task.location.icontains(q, autoescape=True),
                )
            )

        if tag:
            conditions.append(Task.tags.any(Tag.name == tag))

        if conditions:
            query = query.where(and_(*conditions))

        query = query.order_by(Task.due_date.asc().nulls_last(), Task.id.asc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def replace_tags(self, task_id: int, tags: list[Tag]) -> Task | None:
        """
        Make `tags` the complete tag set of a task.

        Associations not in `tags` are removed, new ones are added. Tags
        that end up attached to no task are left in place.

        Returns:
            Task with the new tags, or None when the task does not exist
        """
        # Load task with tags eagerly to avoid lazy loading in async context
        task = await self.get_by_id_full(task_id)
        if not task:
            return None

        task.tags = list(tags)  # SQLAlchemy diffs the collection into task_tags
        await self.db.flush()
        return task

    async def delete(self, id: int) -> bool:
        """
        Delete a task and its tag associations.

        Returns:
            True if the task row existed, False otherwise

        SQL equivalent:
            DELETE FROM task_tags WHERE task_id = {id};
            DELETE FROM tasks WHERE id = {id};
        """
        await self.db.execute(delete(task_tags).where(task_tags.c.task_id == id))
        return await super().delete(id)
