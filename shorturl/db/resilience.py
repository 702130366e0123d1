"""Database connection retry for application startup.

The service cannot do anything useful without its database, so startup
waits for the first successful round trip, retrying with exponential
backoff and jitter, and gives up after a bounded number of attempts.
"""

import asyncio
import logging
import random

from sqlalchemy.sql import text

from shorturl.core.config import settings
from shorturl.db.session import SessionManager

logger = logging.getLogger(__name__)


def backoff_delay(attempt: int, initial_delay: float, max_delay: float, jitter_factor: float) -> float:
    """Delay before retry number ``attempt`` (1-based), with jitter applied."""
    delay = min(initial_delay * (2 ** (attempt - 1)), max_delay)
    jitter = delay * jitter_factor
    return max(0.0, delay + random.uniform(-jitter, jitter)) if jitter > 0 else delay


async def initialize_database_connection(
    session_manager: SessionManager,
    max_attempts: int = settings.DB_CONNECT_RETRY_ATTEMPTS,
    initial_delay: float = settings.DB_CONNECT_RETRY_INITIAL_DELAY,
    max_delay: float = settings.DB_CONNECT_RETRY_MAX_DELAY,
    jitter_factor: float = settings.DB_CONNECT_RETRY_JITTER,
) -> bool:
    """Initialize database connection with retry and exponential backoff.

    Args:
        session_manager: Storage client to probe
        max_attempts: Number of connection attempts
        initial_delay: Delay after the first failure, in seconds
        max_delay: Upper bound for any single delay, in seconds
        jitter_factor: Fraction of the delay randomly added or removed

    Returns:
        bool: True if connection was successful, False otherwise
    """
    logger.info(f"Initializing database connection (max attempts: {max_attempts})")

    for attempt in range(1, max_attempts + 1):
        try:
            async with session_manager.session() as session:
                await session.execute(text("SELECT 1"))

            logger.info(f"Database connection established on attempt {attempt}")
            return True

        except Exception as e:
            if attempt < max_attempts:
                backoff_time = backoff_delay(attempt, initial_delay, max_delay, jitter_factor)
                logger.warning(
                    f"Database connection attempt {attempt}/{max_attempts} failed: {e}. "
                    f"Retrying in {backoff_time:.2f} seconds..."
                )
                await asyncio.sleep(backoff_time)
            else:
                logger.error(
                    f"Failed to connect to database after {max_attempts} attempts. "
                    f"Last error: {e}"
                )

    return False
