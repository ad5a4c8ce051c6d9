"""
Dependencies for FastAPI endpoints.

Endpoints receive ready-made services through Depends() instead of
opening sessions themselves:

    async def create_task(
        data: TaskCreate,
        service: TaskService = Depends(get_task_service),
    ):
        ...

One request gets one session; tests replace get_db through
app.dependency_overrides.
"""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import AsyncSessionLocal
from ..services import TagService, TaskService

# ============================================================================
# DATABASE SESSION DEPENDENCY
# ============================================================================


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped database session.

    1. Opens a session
    2. Hands it to the endpoint
    3. Commits if the endpoint succeeded
    4. Rolls back if it raised
    5. Closes the session
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ============================================================================
# SERVICE DEPENDENCIES
# ============================================================================


async def get_task_service(db: AsyncSession = Depends(get_db)) -> TaskService:
    """TaskService bound to the request session."""
    return TaskService(db)


async def get_tag_service(db: AsyncSession = Depends(get_db)) -> TagService:
    """TagService bound to the request session."""
    return TagService(db)
