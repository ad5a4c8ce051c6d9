"""Task service: the query path and the write commands."""

from collections.abc import Iterable
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import storage_errors
from ..core.exceptions import NotFoundError, ValidationError
from ..core.logging import get_logger
from ..models import Task, TaskStatus
from ..repositories import TagRepository, TaskRepository
from .tag import normalize_tag_names

logger = get_logger(__name__)


class TaskService:
    """
    Service for tasks.

    Read path:
    - search_tasks: free text + tag filter, tags fetched in the same round

    Write path (each call is independent and touches one task):
    - create_task
    - update_task (full replace, including the tag set)
    - toggle_status
    - delete_task

    Validation and existence checks run before anything is written.
    Store failures surface as StorageError; nothing is retried.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.task_repo = TaskRepository(db)
        self.tag_repo = TagRepository(db)

    # ------------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------------

    async def search_tasks(self, q: str | None = None, tag: str | None = None) -> list[Task]:
        """
        Find tasks matching every supplied filter.

        Args:
            q: Case-insensitive substring of title, description or location
            tag: Exact tag name, compared as given (no trimming)

        Returns:
            Tasks with their tags, ordered by due date; empty list if none match

        Only None and "" mean "no filter". A whitespace-only tag is a real
        filter that matches nothing, since stored tag names are never blank.
        """
        async with storage_errors("Query failed"):
            return await self.task_repo.search(q=q or None, tag=tag or None)

    # ------------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------------

    async def create_task(
        self,
        title: str | None,
        description: str | None = None,
        due_date: date | None = None,
        location: str | None = None,
        tag_names: Iterable[str] | None = None,
    ) -> Task:
        """
        Create a task in status "pending" and attach its tags.

        Args:
            title: Required, must contain non-whitespace characters
            description: Free text
            due_date: Optional deadline
            location: Optional place
            tag_names: Tag names, found or created by name

        Returns:
            Created task with tags loaded

        Raises:
            ValidationError: Empty title
            StorageError: The store rejected the write
        """
        title = self._validate_title(title)
        names = normalize_tag_names(tag_names)

        async with storage_errors("Create failed"):
            task = await self.task_repo.create(
                Task(
                    title=title,
                    description=description,
                    due_date=due_date,
                    location=location,
                    status=TaskStatus.PENDING,
                )
            )

            if names:
                tags = await self.tag_repo.get_or_create_many(names)
                await self.task_repo.replace_tags(task.id, tags)

            await self.db.flush()
            task = await self.task_repo.get_by_id_full(task.id)

        logger.info("Task created", extra={"task_id": task.id, "tags": names})
        return task

    async def update_task(
        self,
        task_id: int,
        title: str | None,
        description: str | None,
        due_date: date | None,
        location: str | None,
        status: TaskStatus | str,
        tag_names: Iterable[str] | None,
    ) -> Task:
        """
        Overwrite every field of a task and replace its tag set.

        This is a full replace, not a patch: None clears a field and an
        empty tag list removes all tags. Tags that lose their last task are
        not deleted.

        Raises:
            NotFoundError: No task with this id
            ValidationError: Empty title or unknown status
            StorageError: The store rejected the write
        """
        async with storage_errors("Update failed"):
            if await self.task_repo.get_by_id(task_id) is None:
                raise NotFoundError("Task", task_id)

            title = self._validate_title(title)
            status = self._validate_status(status)
            names = normalize_tag_names(tag_names)

            await self.task_repo.update(
                task_id,
                title=title,
                description=description,
                due_date=due_date,
                location=location,
                status=status,
            )

            tags = await self.tag_repo.get_or_create_many(names)
            await self.task_repo.replace_tags(task_id, tags)

            await self.db.flush()
            task = await self.task_repo.get_by_id_full(task_id)

        logger.info("Task updated", extra={"task_id": task_id, "status": status.value, "tags": names})
        return task

    async def toggle_status(self, task_id: int) -> Task:
        """
        Flip pending <-> completed, keeping every other field and the tags.

        Raises:
            NotFoundError: No task with this id
        """
        async with storage_errors("Update failed"):
            task = await self.task_repo.get_by_id(task_id)
            if task is None:
                raise NotFoundError("Task", task_id)

            new_status = task.status.toggled()
            await self.task_repo.update(task_id, status=new_status)
            await self.db.flush()
            task = await self.task_repo.get_by_id_full(task_id)

        logger.info("Task status toggled", extra={"task_id": task_id, "status": new_status.value})
        return task

    async def delete_task(self, task_id: int) -> bool:
        """
        Delete a task and its tag associations.

        Returns:
            True if a task was deleted, False if the id did not exist.
            A missing id is not an error.
        """
        async with storage_errors("Delete failed"):
            deleted = await self.task_repo.delete(task_id)
            await self.db.flush()

        logger.info("Task deleted", extra={"task_id": task_id, "deleted": deleted})
        return deleted

    # ------------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------------

    @staticmethod
    def _validate_title(title: str | None) -> str:
        if not title or not title.strip():
            raise ValidationError("Task title cannot be empty", field="title")
        return title.strip()

    @staticmethod
    def _validate_status(status: TaskStatus | str) -> TaskStatus:
        try:
            return TaskStatus(status)
        except ValueError:
            allowed = ", ".join(s.value for s in TaskStatus)
            raise ValidationError(
                f"Unknown status '{status}', expected one of: {allowed}", field="status"
            ) from None
