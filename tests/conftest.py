# tests/conftest.py

"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from marketmatch.db.models import Base
from marketmatch.db.session import (
    engine_options,
    get_db,
    get_session_factory,
    make_session_factory,
)
from marketmatch.main import app
from marketmatch.realtime import ChangeFeed, get_change_feed
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """A fresh SQLite database file per test.

    A file (rather than :memory:) lets the form, the leaderboard listener,
    and the API each open their own connection, as they do in production.
    """
    url = f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    test_engine = create_async_engine(url, **engine_options(url))
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(engine)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Fixture to provide a database session to a test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def feed() -> ChangeFeed:
    """A change feed private to the test."""
    return ChangeFeed(queue_size=8)


@pytest.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession], feed: ChangeFeed
) -> AsyncGenerator[AsyncClient, None]:
    """Fixture to provide an async test client for the API."""

    # Override the database and feed dependencies to use the test instances
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_change_feed] = lambda: feed

    transport = ASGITransport(app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    # Clean up the overrides after the test
    app.dependency_overrides.clear()
