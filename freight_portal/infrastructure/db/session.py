"""
Process-wide async engine and session factory.

Both are created lazily from ``DATABASE_URL`` and torn down by
``dispose_engine`` so the API lifespan and the scripts share one pool.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from freight_portal.core.config import get_settings

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def build_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an engine with pool options suited to the backend in ``url``."""
    options: dict[str, Any] = {"echo": echo}
    if url.startswith("sqlite"):
        # One shared connection, otherwise every checkout sees a fresh empty database.
        if ":memory:" in url:
            options["poolclass"] = StaticPool
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_pre_ping"] = True
    return create_async_engine(url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Services read attributes after commit; expiring them would force lazy IO.
    return async_sessionmaker(engine, expire_on_commit=False)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _engine, _session_factory

    if _session_factory is None:
        _engine = build_engine(get_settings().async_database_url)
        _session_factory = build_session_factory(_engine)
    return _session_factory


async def get_session() -> AsyncIterator[AsyncSession]:
    async with get_session_factory()() as session:
        yield session


async def dispose_engine() -> None:
    """Close pooled connections; called on application shutdown."""
    global _engine, _session_factory

    engine, _engine, _session_factory = _engine, None, None
    if engine is not None:
        await engine.dispose()
