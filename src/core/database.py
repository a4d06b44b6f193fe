"""Database configuration and session management."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from .settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# SQLAlchemy Base for ORM models
Base = declarative_base()


def _engine_options(url: str) -> dict:
    """Pool options are only meaningful for server databases."""
    if url.startswith("sqlite"):
        return {"echo": settings.debug}
    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_timeout": settings.database_pool_timeout,
        "pool_recycle": settings.database_pool_recycle,
        "echo": settings.debug,
    }


async_engine = create_async_engine(
    settings.async_database_url,
    **_engine_options(settings.async_database_url),
)

AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False,
)


class DatabaseManager:
    """Database connection and session management."""

    def __init__(self):
        self._async_engine = async_engine

    async def connect(self) -> None:
        """Initialize database connections."""
        try:
            async with self._async_engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Database async connection established")
        except Exception as e:
            logger.error(f"Failed to connect to database: {e}")
            raise

    async def disconnect(self) -> None:
        """Close database connections."""
        try:
            await self._async_engine.dispose()
            logger.info("Database connections closed")
        except Exception as e:
            logger.error(f"Error closing database connections: {e}")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get async database session."""
        async with AsyncSessionLocal() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()


# Global database manager instance
_db_manager = DatabaseManager()


def get_database() -> DatabaseManager:
    """Get the database manager instance."""
    return _db_manager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session for FastAPI."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """
    Scope a multi-row mutation to a single commit.

    Commits when the block exits normally and rolls back on any exception,
    so related rows (an album and its songs, a dispute and both parties)
    are never left half-written.
    """
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise


def dialect_insert(session: AsyncSession, model):
    """
    Return an INSERT construct supporting ON CONFLICT for the session's dialect.

    PostgreSQL and SQLite both expose ``on_conflict_do_nothing`` and
    ``on_conflict_do_update`` on their dialect-specific insert.
    """
    dialect_name = session.bind.dialect.name
    if dialect_name == "postgresql":
        return postgresql.insert(model)
    if dialect_name == "sqlite":
        return sqlite.insert(model)
    raise RuntimeError(f"Insert-or-ignore is not supported for dialect '{dialect_name}'")
