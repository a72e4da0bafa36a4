"""Async database engine and session management using SQLAlchemy."""

from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from walletcore.core.config import get_settings
from walletcore.db.base import Base


def get_async_engine(url: Optional[str] = None) -> AsyncEngine:
    """Create and return the async database engine.

    Uses asyncpg for PostgreSQL URLs and aiosqlite for SQLite URLs,
    whichever driver the URL names.
    """
    settings = get_settings()
    return create_async_engine(
        url or settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_pre_ping=True,
    )


def get_async_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create and return the async session maker."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create tables directly (development and tests; migrations preferred)."""
    from walletcore.db import tables  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
