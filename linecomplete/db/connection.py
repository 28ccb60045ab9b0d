"""Async engine and read-only sessions for the solutions database.

The completeness engine only reads. Sessions handed out here never commit;
whatever implicit transaction a query opened is rolled back on exit.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from linecomplete.config import DBConfig, get_config

# Anything that opens a session: get_session, or an async_sessionmaker in tests
SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]

_engine: AsyncEngine | None = None
_sessionmaker: sessionmaker | None = None


def _engine_options(db_config: DBConfig) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": db_config.echo}
    if db_config.url.lower().startswith("sqlite"):
        # SQLite engines use a static or null pool
        return options

    options.update(
        pool_size=db_config.pool_size,
        max_overflow=db_config.pool_max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
        pool_recycle=3600,
    )
    return options


def get_engine() -> AsyncEngine:
    """Lazily create the process-wide engine from ``DATABASE_URL``.

    Raises:
        KeyError: If DATABASE_URL is not configured
    """
    global _engine

    if _engine is None:
        db_config = get_config().db
        _engine = create_async_engine(db_config.url, **_engine_options(db_config))

    return _engine


def get_session_factory() -> sessionmaker:
    global _sessionmaker

    if _sessionmaker is None:
        _sessionmaker = sessionmaker(
            get_engine(), class_=AsyncSession, expire_on_commit=False
        )

    return _sessionmaker


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Open a read-only session.

    Each concurrent task must open its own session; an ``AsyncSession`` is
    not safe to share between tasks.

    Usage:
        async with get_session() as session:
            lines = await fetch_project_lines(session, project_id)
    """
    session = get_session_factory()()

    try:
        yield session
    finally:
        await session.rollback()
        await session.close()


async def close_db() -> None:
    """Dispose the engine's pool. Called when a CLI command finishes."""
    global _engine, _sessionmaker

    if _engine is None:
        return

    await _engine.dispose()
    _engine = None
    _sessionmaker = None
