"""Async SQLAlchemy engine and session factory.

The engine is the store handle: create_app() builds (or receives) one and
keeps it, with its session factory, on app.state. get_db() then hands each
request its own AsyncSession from that factory.
"""

from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from recordvault.config import Settings


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the engine for settings.database_url.

    SQLite (dev/tests) gets no pool sizing; Postgres gets a small pool.
    """
    kwargs = {"echo": settings.debug}
    if not settings.database_url.startswith("sqlite"):
        kwargs.update(pool_size=5, max_overflow=15, pool_pre_ping=True)
    return create_async_engine(settings.database_url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """One factory per app; sessions are per request."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Yield a request-scoped AsyncSession from the app's factory."""
    factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with factory() as session:
        yield session
