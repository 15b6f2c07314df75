"""Database connection pool management with SQLAlchemy 2.0.

Provides asynchronous database sessions with connection pooling
and lifecycle management. PostgreSQL (asyncpg) in production,
SQLite (aiosqlite) for local runs and tests.
"""

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

from marquee.database.models import Base
from marquee.settings import settings


class DatabaseConnection:
    """Manages the async connection pool and session factory.

    Every store unit of work opens its own short transaction
    through `async_session()`; there is no batch-wide transaction.

    Attributes:
        url: SQLAlchemy async database URL.

    Example:
        ```python
        db = DatabaseConnection()
        async with db.async_session() as session:
            await session.execute(text("SELECT 1"))
        ```
    """

    def __init__(self, url: str | None = None) -> None:
        """Initialize engine and session factory.

        Args:
            url: Async database URL. Defaults to the configured PostgreSQL URL.
        """
        self.url = url or settings.database.async_url
        self._async_engine = self._create_async_engine(self.url)
        self._async_session_factory = async_sessionmaker(
            bind=self._async_engine,
            autoflush=False,
            expire_on_commit=False,
        )

    @staticmethod
    def _create_async_engine(url: str) -> AsyncEngine:
        """Create asynchronous SQLAlchemy engine.

        SQLite engines keep the driver's default pool; pool sizing
        only applies to server databases.

        Args:
            url: Async database URL.

        Returns:
            Configured AsyncEngine.
        """
        kwargs: dict[str, Any] = {"echo": settings.debug}
        if not url.startswith("sqlite"):
            kwargs.update(
                pool_size=settings.database.pool_size,
                max_overflow=settings.database.pool_overflow,
                pool_timeout=settings.database.pool_timeout,
                pool_pre_ping=True,
            )
        return create_async_engine(url, **kwargs)

    @asynccontextmanager
    async def async_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional async session scope.

        Automatically commits on success, rolls back on exception,
        and closes the session when done.

        Yields:
            SQLAlchemy AsyncSession instance.

        Raises:
            Exception: Re-raises any exception after rollback.
        """
        session = self._async_session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def check_connection(self) -> bool:
        """Test database connectivity with a simple query.

        Returns:
            True if connection successful, False otherwise.
        """
        try:
            async with self.async_session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception:  # noqa: BLE001
            return False

    async def create_all(self) -> None:
        """Create every table declared on the model metadata."""
        async with self._async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        """Drop every table declared on the model metadata."""
        async with self._async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        """Dispose the connection pool and release resources."""
        await self._async_engine.dispose()

    @property
    def async_engine(self) -> AsyncEngine:
        """Get the underlying async engine."""
        return self._async_engine


# =============================================================================
# MODULE-LEVEL CONVENIENCE FUNCTIONS
# =============================================================================

_db: DatabaseConnection | None = None


def get_database() -> DatabaseConnection:
    """Get the shared DatabaseConnection instance.

    Creates the instance on first call (lazy initialization).

    Returns:
        DatabaseConnection instance.
    """
    global _db  # noqa: PLW0603
    if _db is None:
        _db = DatabaseConnection()
    return _db


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for async database sessions.

    Yields:
        SQLAlchemy AsyncSession with automatic transaction management.
    """
    db = get_database()
    async with db.async_session() as session:
        yield session


async def close_database() -> None:
    """Close the shared connection pool.

    Call during application shutdown to release resources.
    """
    global _db  # noqa: PLW0603
    if _db is not None:
        await _db.dispose()
        _db = None
