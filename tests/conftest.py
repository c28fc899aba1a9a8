"""Test fixtures and configuration."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from mission_control.config import Settings
from mission_control.dependencies import get_app_settings, get_db, get_snapshot_store
from mission_control.main import create_app
from mission_control.models import Base
from mission_control.services.snapshot_store import SqlSnapshotStore
from mission_control.services.telemetry import AgentRoster, TelemetryConfig

TEST_API_KEY = "test-api-key-0123456789"
UPSTREAM_URL = "https://upstream.test"
UPSTREAM_TOKEN = "upstream-token"


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        api_key=TEST_API_KEY,
        upstream_api_url=UPSTREAM_URL,
        upstream_api_token=UPSTREAM_TOKEN,
    )


@pytest.fixture
def roster() -> AgentRoster:
    return AgentRoster.build(
        {
            "agent:main:main": "noah",
            "agent:kai:main": "kai",
            "agent:researcher:main": "dora",
        },
        ["noah", "kai", "dora"],
    )


@pytest.fixture
def telemetry_config(roster: AgentRoster) -> TelemetryConfig:
    return TelemetryConfig(roster=roster)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-Api-Key": TEST_API_KEY}


@pytest_asyncio.fixture
async def db_engine():
    """Create an in-memory SQLite engine for tests."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=db_engine, class_=AsyncSession, expire_on_commit=False
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session bound to the test engine."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def store(session_factory) -> SqlSnapshotStore:
    return SqlSnapshotStore(session_factory)


@pytest_asyncio.fixture
async def client(session_factory, settings) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client with overridden DB, settings and store."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_app_settings] = lambda: settings
    app.dependency_overrides[get_snapshot_store] = lambda: SqlSnapshotStore(session_factory)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
