"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe sees the test engine
    - Each client gets a fresh SessionRegistry (no identity leaks between tests)

Design Decisions:
    - SQLite in-memory with StaticPool: all sessions share the one connection
      (PostgreSQL-specific features not exercised here)
    - listing page size pinned to 2 via get_settings override so paging is cheap to exercise
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from app.config import Settings, get_settings
from app.core.session_context import SessionRegistry
from app.db.base import Base
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.services.identity_store import IdentityStore
from app.services.record_store import RecordStore
import app.infrastructure.database as db_module
from app.main import app

TEST_PAGE_SIZE = 2


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def records(test_db):
    return RecordStore(test_db)


@pytest.fixture
def identities(test_db):
    return IdentityStore(test_db)


@pytest.fixture
def registry():
    """Fresh per-test SessionRegistry installed on the app."""
    original = app.state.sessions
    app.state.sessions = SessionRegistry()
    yield app.state.sessions
    app.state.sessions = original


@pytest.fixture
async def client(test_engine, test_session_factory, registry):
    """FastAPI test client with DB and settings dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    def override_get_settings():
        return Settings(listing_page_size=TEST_PAGE_SIZE)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = override_get_settings

    # Patch db_manager for the readiness probe, which reads it directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
