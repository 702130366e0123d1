"""Database base configuration for SQLAlchemy with SQLModel.

This module provides base database configuration for async SQLAlchemy with SQLModel.
It includes:
- Engine configuration
- Schema setup
- Health check functionality
"""

from typing import TYPE_CHECKING, Dict, Optional
import asyncio
import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool
from sqlalchemy.sql import text
from sqlmodel import SQLModel

from shorturl.core.config import settings

# Register table models with SQLModel metadata
import shorturl.models  # noqa: F401

if TYPE_CHECKING:
    from shorturl.db.session import SessionManager

logger = logging.getLogger(__name__)

# Mapping of environment to SQLAlchemy engine configurations
ENGINE_CONFIGS: Dict[str, Dict] = {
    "development": {
        "echo": settings.DB_ECHO,
        "pool_size": settings.POSTGRES_POOL_SIZE,
        "max_overflow": settings.POSTGRES_POOL_MAX_OVERFLOW,
        "pool_timeout": settings.POSTGRES_POOL_TIMEOUT,
        "pool_recycle": settings.POSTGRES_POOL_RECYCLE,
        "pool_pre_ping": True,
    },
    "production": {
        "echo": False,
        "pool_size": settings.POSTGRES_POOL_SIZE,
        "max_overflow": settings.POSTGRES_POOL_MAX_OVERFLOW,
        "pool_timeout": settings.POSTGRES_POOL_TIMEOUT,
        "pool_recycle": settings.POSTGRES_POOL_RECYCLE,
        "pool_pre_ping": True,
    },
    "testing": {
        "echo": False,
        "poolclass": NullPool,  # Use NullPool for tests to avoid connection issues
    },
}


def get_engine_config(environment: Optional[str] = None) -> Dict:
    """Get the engine configuration for an environment.

    Args:
        environment: Environment name, defaults to ``settings.ENVIRONMENT``.
            Unknown environments (e.g. staging) use the development pool.

    Returns:
        Dict: Engine configuration parameters for the environment.
    """
    env = environment or settings.ENVIRONMENT.value
    return dict(ENGINE_CONFIGS.get(env, ENGINE_CONFIGS["development"]))


def get_engine(database_url: Optional[str] = None, **overrides) -> AsyncEngine:
    """Create and configure an async SQLAlchemy engine.

    Args:
        database_url: Async database URL, defaults to the configured one.
        **overrides: Engine keyword arguments replacing the environment defaults.

    Returns:
        AsyncEngine: Configured SQLAlchemy async engine instance.
    """
    engine_url = database_url or str(settings.SQLALCHEMY_DATABASE_URI)
    url = make_url(engine_url)
    engine_config = get_engine_config()
    if url.get_backend_name() == "sqlite":
        # SQLite pools take no sizing arguments
        for option in ("pool_size", "max_overflow", "pool_timeout", "pool_recycle"):
            engine_config.pop(option, None)
    engine_config.update(overrides)

    logger.info(f"Creating database engine for {url.render_as_string(hide_password=True)}")

    return create_async_engine(engine_url, **engine_config)


async def create_schema(engine: AsyncEngine) -> None:
    """Create missing tables. Existing tables are left untouched."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database schema is up to date")


class DatabaseHealthCheck:
    """Health check functionality for the database connection."""

    def __init__(self, session_manager: "SessionManager"):
        self.session_manager = session_manager

    async def check_connection(self) -> Dict:
        """Check database connectivity and return status.

        Returns:
            Dict: Health check result containing status and latency information
        """
        loop = asyncio.get_running_loop()
        start_time = loop.time()
        status = "healthy"
        error_message = None
        latency_ms = 0

        try:
            async with self.session_manager.session() as session:
                await session.execute(text("SELECT 1"))
            latency_ms = int((loop.time() - start_time) * 1000)
        except Exception as e:
            status = "unhealthy"
            error_message = "Database unreachable"
            logger.error(f"Database health check failed: {e}")

        return {
            "status": status,
            "latency_ms": latency_ms,
            "error": error_message,
        }
