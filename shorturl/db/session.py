"""Session management for database operations.

This module provides the storage client handed to the service layer: a
``SessionManager`` wrapping one async engine and its session factory,
with context managers for plain sessions and committed transactions.
"""

from typing import AsyncGenerator, Optional
import logging
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from shorturl.db.base import create_schema, get_engine

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns an async engine and hands out sessions bound to it.

    One instance is created per application and shared by every request;
    the engine's connection pool is the only shared state.
    """

    def __init__(self, engine: AsyncEngine):
        """
        Initialize the session manager.

        Args:
            engine: Async engine all sessions are bound to
        """
        self.engine = engine
        self.session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_url(cls, database_url: Optional[str] = None, **engine_options) -> "SessionManager":
        """Build a session manager with a new engine for ``database_url``."""
        return cls(get_engine(database_url, **engine_options))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session for read-only work; it is closed on exit.

        Yields:
            AsyncSession: SQLAlchemy async session
        """
        session = self.session_factory()
        try:
            yield session
        finally:
            await session.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Context manager for a database session with transaction support.

        Commits on successful completion or rolls back on error.

        Yields:
            AsyncSession: SQLAlchemy async session

        Example:
            ```python
            async with session_manager.transaction() as session:
                session.add(ShortURL(key="abc123", original_url="https://example.com"))
                # Commits automatically on context exit if no errors
            ```
        """
        async with self.session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_schema(self) -> None:
        """Create the tables of all registered models if they are missing."""
        await create_schema(self.engine)

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()
        logger.info("Database engine disposed")
