"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used throughout the application for database access.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlmodel.ext.asyncio.session import AsyncSession

from vibe_creator.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

engine = create_engine(settings.database_url)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Yields:
        AsyncSession: An asynchronous SQLModel session.
    """
    async with async_session_maker() as session:
        yield session


def get_session_factory():
    """Dependency returning the session factory used by background jobs."""
    return async_session_maker


async def init_db() -> None:
    """
    Initialize the database.

    Creates any missing tables outside production. In production Alembic
    migrations own the schema and this is a no-op.
    """
    if settings.is_production:
        return
    await create_all(engine)
