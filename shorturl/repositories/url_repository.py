"""URL Repository for the URL shortener service.

This module provides the URLRepository class for database operations related to ShortURL models.
Following the Repository pattern, it abstracts database interactions for the key mapping table.
"""

from typing import Optional, Set

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shorturl.models.url import ShortURL, ShortURLCreate
from shorturl.repositories.base import BaseRepository, DuplicateEntityError, RepositoryError

# Fragments identifying a violation of the unique key constraint in
# PostgreSQL ("Key (key)=(...)", constraint name) and SQLite ("short_urls.key")
_KEY_CONFLICT_MARKERS = ("uq_short_urls_key", "(key)=", "short_urls.key")


def is_key_conflict(error: IntegrityError) -> bool:
    """Tell whether an IntegrityError was raised by the unique key constraint."""
    message = str(error.orig if error.orig is not None else error).lower()
    if "unique" not in message and "duplicate" not in message:
        return False
    return any(marker in message for marker in _KEY_CONFLICT_MARKERS)


class URLRepository(BaseRepository[ShortURL, ShortURLCreate]):
    """
    Repository for ShortURL model database operations.

    Supports the point lookups the service needs (by original URL and by
    key), inserting new mappings and listing the keys already in use.
    """

    def __init__(self):
        """Initialize the repository with the ShortURL model type."""
        super().__init__(ShortURL)

    async def create_mapping(self, db: AsyncSession, key: str, original_url: str) -> ShortURL:
        """
        Insert a new key mapping.

        Args:
            db: Database session
            key: The short key
            original_url: The URL the key redirects to

        Returns:
            The created ShortURL entity

        Raises:
            DuplicateEntityError: If the key already exists
            RepositoryError: On other database errors
        """
        try:
            return await self.create(db, ShortURLCreate(key=key, original_url=original_url))
        except IntegrityError as e:
            if is_key_conflict(e):
                raise DuplicateEntityError(self.model_type, "key", key) from e
            raise RepositoryError(f"Database error creating short URL: {e}") from e

    async def get_by_key(self, db: AsyncSession, key: str) -> Optional[ShortURL]:
        """
        Find a mapping by its key.

        Args:
            db: Database session
            key: The unique key to look up

        Returns:
            The ShortURL if found, None otherwise

        Raises:
            RepositoryError: On database errors
        """
        return await self.get_first_by(db, key=key)

    async def get_by_original_url(self, db: AsyncSession, original_url: str) -> Optional[ShortURL]:
        """
        Find the oldest mapping for an original URL.

        Args:
            db: Database session
            original_url: The original URL to look up

        Returns:
            The ShortURL if found, None otherwise

        Raises:
            RepositoryError: On database errors
        """
        return await self.get_first_by(db, original_url=original_url)

    async def get_original_url(self, db: AsyncSession, key: str) -> Optional[str]:
        """
        Fetch only the original URL for a key, for redirects.

        Args:
            db: Database session
            key: The key to resolve

        Returns:
            The original URL if the key exists, None otherwise

        Raises:
            RepositoryError: On database errors
        """
        try:
            query = select(self.model_type.original_url).where(self.model_type.key == key).limit(1)
            result = await db.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error retrieving original URL by key: {e}") from e

    async def get_existing_keys(self, db: AsyncSession) -> Set[str]:
        """
        Get every key currently persisted.

        Args:
            db: Database session

        Returns:
            Set of keys in use

        Raises:
            RepositoryError: On database errors
        """
        try:
            result = await db.execute(select(self.model_type.key))
            return set(result.scalars().all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error retrieving existing keys: {e}") from e
