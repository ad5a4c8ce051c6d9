"""
Pytest fixtures.

Provides:
- test_db: isolated in-memory SQLite database per test
- test_client: HTTP client for the API, bound to the test database
- tracker_client: the package's own TaskTrackerClient over the same app
- statement_counter: counts SQL statements sent to the test database
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from task_tracker.api.dependencies import get_db
from task_tracker.client import TaskTrackerClient
from task_tracker.core.database import register_sqlite_functions
from task_tracker.main import app
from task_tracker.models import Base

# Test database URL (SQLite in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """
    Async engine over a fresh in-memory database.

    StaticPool keeps a single connection, otherwise the in-memory data
    would vanish between sessions.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    register_sqlite_functions(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_engine):
    """Session on the test database; uncommitted changes are rolled back."""
    TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def override_db(test_engine):
    """Point the app's get_db dependency at the test database."""
    TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with TestSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_client(override_db):
    """Raw HTTP client for the API endpoints."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def tracker_client(override_db):
    """TaskTrackerClient talking to the app in-process."""
    async with TaskTrackerClient("http://test", transport=ASGITransport(app=app)) as client:
        yield client


class StatementCounter:
    """Counts statements executed on an engine between reset() calls."""

    def __init__(self):
        self.count = 0
        self.statements: list[str] = []

    def __call__(self, conn, cursor, statement, parameters, context, executemany):
        self.count += 1
        self.statements.append(statement)

    def reset(self) -> None:
        self.count = 0
        self.statements.clear()


@pytest.fixture
def statement_counter(test_engine):
    counter = StatementCounter()
    event.listen(test_engine.sync_engine, "before_cursor_execute", counter)
    yield counter
    event.remove(test_engine.sync_engine, "before_cursor_execute", counter)


@pytest.fixture(scope="session")
def anyio_backend():
    """Run async tests on asyncio."""
    return "asyncio"
