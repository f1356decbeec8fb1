"""
Database connection and session management using SQLAlchemy async.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from admedia.common.config import get_settings
from admedia.common.exceptions import DatabaseError
from admedia.common.logger import get_logger
from admedia.models.base import Base

logger = get_logger(__name__)


class DatabaseManager:
    """
    Database connection manager.

    Owns the async engine and hands out request-scoped sessions.
    """

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise DatabaseError("Database not initialized. Call init() first.")
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            raise DatabaseError("Database not initialized. Call init() first.")
        return self._session_factory

    async def init(self, url: str | None = None) -> None:
        """Initialize database connection, using the configured URL unless ``url`` is given."""
        settings = get_settings()
        url = url or settings.database.async_url

        engine_kwargs: dict[str, Any] = {"pool_pre_ping": True, "echo": settings.debug}
        if not url.startswith("sqlite"):
            engine_kwargs["pool_size"] = settings.database.pool_size
            engine_kwargs["max_overflow"] = settings.database.max_overflow

        self._engine = create_async_engine(url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        logger.info(
            "Database initialized",
            host=settings.database.host,
            database=settings.database.name,
        )

    async def close(self) -> None:
        """Close database connection."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database connection closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a database session context manager.

        Commits on clean exit, rolls back on any exception.

        Usage:
            async with db.session() as session:
                result = await session.execute(query)
        """
        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connection health."""
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return False


# Global database manager instance
db = DatabaseManager()


async def init_db() -> None:
    await db.init()


async def close_db() -> None:
    await db.close()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for FastAPI to get a database session.

    Usage:
        @router.get("/campaigns")
        async def list_campaigns(session: AsyncSession = Depends(get_session)):
            ...
    """
    async with db.session() as session:
        yield session


async def create_tables() -> None:
    """Create all tables in the database."""
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def drop_tables() -> None:
    """Drop all tables in the database."""
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Database tables dropped")
