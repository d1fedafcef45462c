"""Database engine and session management.

The engine and session factory are built once by the application lifespan
(see `notetutor.main`) and stored on `app.state`; `get_db` hands out a
session per request from that factory.
"""

from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from notetutor.config import Settings


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database URL."""
    url = settings.database_url
    kwargs: dict[str, Any] = {"echo": settings.debug, "pool_pre_ping": True}
    if not url.startswith("sqlite"):
        kwargs.update(pool_size=5, max_overflow=10)
    if settings.database_requires_ssl:
        kwargs["connect_args"] = {"ssl": "require"}
    return create_async_engine(url, **kwargs)


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to `engine`."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
