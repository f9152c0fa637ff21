"""Async SQLAlchemy engine and session dependency.

Repositories issue raw text() SQL through the session; there are no ORM models.
Services own transactions (commit / rollback); the dependency only closes.
"""

from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import settings

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one AsyncSession per request, closed afterwards."""
    async with async_session_factory() as session:
        yield session


async def check_database() -> None:
    """Fail fast at startup if PostgreSQL is unreachable or unmigrated."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1 FROM auctions LIMIT 1"))
