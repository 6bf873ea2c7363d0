"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) and an in-process
stand-in for the Redis client so tests run without Docker / PostgreSQL /
Redis.  Each test gets fresh tables and a fresh session store.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from tripshare.api.app import create_app
from tripshare.api.dependencies import get_db, get_session_store
from tripshare.api.middleware import limiter
from tripshare.config import settings
from tripshare.infrastructure.database import Base
from tripshare.infrastructure.sessions import SessionStore


TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


class FakeRedis:
    """The subset of ``redis.asyncio.Redis`` used by ``SessionStore``."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttl: dict[str, int] = {}

    async def set(self, key, value, ex=None):
        self.data[key] = value
        if ex is not None:
            self.ttl[key] = ex
        return True

    async def get(self, key):
        return self.data.get(key)


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _fast_settings(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path / "uploads"))
    limiter.reset()


@pytest_asyncio.fixture
async def session_factory():
    """Create tables on a private in-memory DB, drop them afterwards."""
    engine = create_async_engine(TEST_DB_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest_asyncio.fixture
async def app(session_factory, fake_redis):
    """The real application wired to SQLite and the fake session store."""

    async def _test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def _test_sessions():
        return SessionStore(fake_redis, settings.session_max_age_seconds)

    application = create_app()
    application.dependency_overrides[get_db] = _test_db
    application.dependency_overrides[get_session_store] = _test_sessions
    return application


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def other_client(app):
    """A second browser with its own cookie jar."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
