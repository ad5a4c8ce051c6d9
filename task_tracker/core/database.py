"""Database connection and session management."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from .config import settings
from .exceptions import StorageError
from .logging import get_logger

logger = get_logger(__name__)


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def register_sqlite_functions(engine: AsyncEngine) -> None:
    """
    Replace SQLite's lower() on every new connection.

    The built-in lower() only folds ASCII, so `icontains` would treat
    "ÉCOLE" and "école" as different. Python's str.lower folds the whole
    Unicode range. Other backends already have a Unicode-aware lower().

    Usage:
        engine = create_async_engine("sqlite+aiosqlite:///...")
        register_sqlite_functions(engine)
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


# For SQLite, use StaticPool to avoid greenlet issues
# For server databases, use NullPool
if "sqlite" in settings.DATABASE_URL:
    engine = create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DATABASE_ECHO,
        poolclass=StaticPool,  # SQLite requires StaticPool for async
        connect_args={"check_same_thread": False},  # Allow multi-threaded access
    )
    register_sqlite_functions(engine)
else:
    engine = create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DATABASE_ECHO,
        poolclass=NullPool,
    )

# Create session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def init_db():
    """Initialize database (create all tables)."""
    from ..models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def storage_errors(failure_message: str) -> AsyncIterator[None]:
    """
    Turn any SQLAlchemy failure inside the block into a StorageError.

    Usage:
        async with storage_errors("Create failed"):
            await repo.create(task)

    Domain errors raised inside the block pass through untouched.
    The failure is terminal for the request: nothing is retried.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error(failure_message, extra={"error": str(exc)}, exc_info=True)
        raise StorageError(failure_message) from exc
