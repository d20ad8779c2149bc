# src/marketmatch/db/session.py

"""Engine and session factory for the players database."""
import logging
import os
from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./marketmatch.db")

# Seconds a SQLite writer waits on a locked file. The form and the
# leaderboard write through separate connections to the same file.
SQLITE_LOCK_TIMEOUT = 15


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").lower() in ("1", "true", "yes")


def engine_options(url: str) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine`` given a database URL."""
    options: dict[str, Any] = {"echo": _env_flag("DB_ECHO")}
    if url.startswith("sqlite"):
        options["connect_args"] = {"timeout": SQLITE_LOCK_TIMEOUT}
        return options

    options.update(
        pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
        max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "10")),
        pool_recycle=int(os.getenv("DB_POOL_RECYCLE", "3600")),
        pool_pre_ping=True,
    )
    return options


def make_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessions whose players stay readable after the writing session commits."""
    return async_sessionmaker(
        bind=bind, autocommit=False, autoflush=False, expire_on_commit=False
    )


engine = create_async_engine(DATABASE_URL, **engine_options(DATABASE_URL))
AsyncSessionLocal = make_session_factory(engine)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Dependency: the factory components open their own sessions from."""
    return AsyncSessionLocal


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency: one session per request, rolled back if the handler raises."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            logger.warning("Rolling back request session", exc_info=True)
            await session.rollback()
            raise
