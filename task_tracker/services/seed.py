"""Demo data for an empty database."""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..models import TaskStatus
from ..repositories import TaskRepository
from .task import TaskService

logger = get_logger(__name__)

DEMO_TASKS: list[dict] = [
    {
        "title": "Buy milk",
        "description": "Milk and eggs from the supermarket",
        "due_date": date(2026, 1, 21),
        "location": "Corner supermarket",
        "tags": ["shopping", "chores"],
    },
    {
        "title": "Submit report",
        "description": "Due Monday morning",
        "due_date": date(2026, 1, 26),
        "location": "University",
        "status": TaskStatus.COMPLETED,
        "tags": ["university"],
    },
    {
        "title": "Go running",
        "description": "5 km in the park",
        "due_date": date(2026, 1, 22),
        "location": "Central park",
        "tags": ["health"],
    },
    {
        "title": "Return library books",
        "description": "The tech book and the novel",
        "due_date": date(2026, 1, 22),
        "location": "City library",
    },
    {
        "title": "Dental checkup",
        "description": "Appointment at 3 pm, bring the insurance card",
        "due_date": date(2026, 1, 24),
        "location": "Station dental clinic",
    },
]


async def seed_demo_data(db: AsyncSession) -> int:
    """
    Insert DEMO_TASKS if the task table is empty.

    Returns:
        Number of tasks created (0 when the database already had tasks)
    """
    if await TaskRepository(db).count() > 0:
        logger.info("Database not empty, skipping demo data")
        return 0

    service = TaskService(db)
    for item in DEMO_TASKS:
        task = await service.create_task(
            title=item["title"],
            description=item["description"],
            due_date=item["due_date"],
            location=item["location"],
            tag_names=item.get("tags"),
        )
        if item.get("status", TaskStatus.PENDING) != task.status:
            await service.toggle_status(task.id)

    logger.info("Demo data created", extra={"tasks": len(DEMO_TASKS)})
    return len(DEMO_TASKS)
