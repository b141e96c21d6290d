"""Pytest configuration and shared fixtures.

Organization:
    - Application Fixtures: FastAPI app and HTTP client
    - Database Fixtures: in-memory SQLite engine, session and a task factory
    - Authentication Fixtures: user ids and mock auth clients
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import UTC, datetime
import os
from typing import TYPE_CHECKING, Any

from httpx import ASGITransport, AsyncClient
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine

    from taskflow_service.core.models import Task

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DB_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "")
os.environ.setdefault("REDIS_URL", "")
os.environ.setdefault("AUTH_SERVICE_URL", "")
os.environ.setdefault("AUTH_DEV_MODE", "false")
os.environ.setdefault("LOG_JSON_LOGS", "false")
os.environ.setdefault("LOG_FILE_PATH", "")
os.environ.setdefault("ANALYTICS_CACHE_ENABLED", "false")

ALICE_ID = "6f1c2a7e-3b4d-4c5e-8f90-a1b2c3d4e5f6"
BOB_ID = "9e8d7c6b-5a4f-4e3d-9c2b-1a0f9e8d7c6b"
REFERENCE_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


# ============================================================================
# Settings and process-wide singletons
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Clear cached settings, auth client and rate limiter between tests."""
    from taskflow_service.core.dependencies.auth import get_auth_client
    from taskflow_service.core.dependencies.ratelimit import get_analytics_rate_limiter
    from taskflow_service.core.settings import clear_all_caches

    clear_all_caches()
    get_auth_client.cache_clear()
    get_analytics_rate_limiter.cache_clear()
    yield
    clear_all_caches()
    get_auth_client.cache_clear()
    get_analytics_rate_limiter.cache_clear()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Async engine on a fresh in-memory SQLite database with the schema created."""
    from taskflow_service.core.database import Base
    from taskflow_service.core.models import Task, TaskTag  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


TaskFactory = Callable[..., Awaitable["Task"]]


@pytest.fixture
def task_factory(db_session: AsyncSession) -> TaskFactory:
    """Persist a task with explicit timestamps.

    Example:
        task = await task_factory(status="done", due_date=REFERENCE_NOW, tags=["work"])
    """
    from taskflow_service.core.models import Task

    async def create(
        *,
        owner_id: str = ALICE_ID,
        title: str = "Task",
        status: str = "pending",
        priority: str | None = None,
        due_date: datetime | None = None,
        created_at: datetime = REFERENCE_NOW,
        tags: list[str] | None = None,
        **extra: Any,
    ) -> Task:
        task = Task(
            owner_id=owner_id,
            title=title,
            status=status,
            priority=priority,
            due_date=due_date,
            created_at=created_at,
            updated_at=created_at,
            **extra,
        )
        task.set_tags(tags or [])
        db_session.add(task)
        await db_session.commit()
        return task

    return create


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def mock_auth_client():
    """Auth client accepting ``alice-token`` and ``bob-token`` only."""
    from taskflow_service.infra.auth.testing import MockAuthClient

    client = MockAuthClient(user_id=ALICE_ID, accept_unregistered=False)
    client.register_token("alice-token", ALICE_ID, "alice@example.com")
    client.register_token("bob-token", BOB_ID, "bob@example.com")
    return client


@pytest.fixture
def app(session_factory: async_sessionmaker[AsyncSession], mock_auth_client) -> FastAPI:
    """Full application wired to the in-memory database and the mock auth client.

    httpx's ASGITransport does not send lifespan events, so no startup runs.
    """
    from taskflow_service.app.main import create_app
    from taskflow_service.core.dependencies.auth import get_auth_client
    from taskflow_service.core.dependencies.database import get_db_session

    application = create_app()

    async def override_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db_session] = override_session
    application.dependency_overrides[get_auth_client] = lambda: mock_auth_client
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def alice_headers() -> dict[str, str]:
    return {"Authorization": "Bearer alice-token"}


@pytest.fixture
def bob_headers() -> dict[str, str]:
    return {"Authorization": "Bearer bob-token"}
