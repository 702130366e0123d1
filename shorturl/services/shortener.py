"""URL shortening service for the URL shortener application.

This module contains the ShortenedURLService class which implements the
lookup-or-create protocol for short keys and key resolution for redirects.
"""

import logging
from typing import Optional, Set

from shorturl.core.config import settings
from shorturl.db.session import SessionManager
from shorturl.repositories.base import DuplicateEntityError, RepositoryError
from shorturl.repositories.url_repository import URLRepository
from shorturl.services.exceptions import (
    KeyExhaustionError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from shorturl.services.keygen import KeyGenerator

logger = logging.getLogger(__name__)


class ShortenedURLService:
    """
    Service for URL shortening business logic.

    Mediates between the key generator and storage. Every operation runs
    in its own session taken from the session manager; the database's
    unique key constraint decides races between concurrent writers.
    """

    def __init__(
        self,
        session_manager: SessionManager,
        url_repository: URLRepository,
        key_generator: KeyGenerator,
        max_attempts: int = settings.KEY_ALLOCATION_ATTEMPTS,
        max_url_bytes: int = settings.ORIGINAL_URL_MAX_BYTES,
    ):
        """
        Initialize the URL shortening service.

        Args:
            session_manager: Storage client sessions are taken from
            url_repository: Repository for URL data access
            key_generator: Source of candidate keys
            max_attempts: Inserts tried before giving up on allocating a key
            max_url_bytes: Longest original URL accepted, in UTF-8 bytes
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be positive, got {max_attempts}")

        self.session_manager = session_manager
        self.url_repository = url_repository
        self.key_generator = key_generator
        self.max_attempts = max_attempts
        self.max_url_bytes = max_url_bytes

    async def lookup_or_create(self, original_url: str) -> str:
        """
        Return the key for ``original_url``, creating a mapping on first use.

        Repeated calls with the same URL return the same key.

        Args:
            original_url: The URL to shorten

        Returns:
            str: The short key

        Raises:
            ValidationError: If the URL is missing or malformed
            KeyExhaustionError: If no unique key could be allocated
            StorageError: If the database fails
        """
        original_url = self.normalize_original_url(original_url)

        existing = await self._find_key(original_url)
        if existing is not None:
            return existing

        known_keys: Set[str] = set()
        for attempt in range(1, self.max_attempts + 1):
            key = self.key_generator.generate(known_keys)
            try:
                async with self.session_manager.transaction() as db:
                    mapping = await self.url_repository.create_mapping(db, key, original_url)
            except DuplicateEntityError:
                logger.warning(
                    f"Key '{key}' was taken concurrently (attempt {attempt}/{self.max_attempts})"
                )
                known_keys = await self._fetch_existing_keys()
                continue
            except RepositoryError as e:
                logger.error(f"Error creating short URL: {e}")
                raise StorageError("Failed to create short URL") from e

            logger.info(f"Created short URL '{mapping.key}' for {original_url}")
            return mapping.key

        logger.error(f"Could not allocate a unique key after {self.max_attempts} attempts")
        raise KeyExhaustionError(
            f"Could not allocate a unique key after {self.max_attempts} attempts"
        )

    async def resolve_key(self, key: str) -> str:
        """
        Resolve a key to its original URL.

        Args:
            key: The short key

        Returns:
            str: The original URL

        Raises:
            NotFoundError: If no mapping exists for the key
            StorageError: If the database fails
        """
        try:
            async with self.session_manager.session() as db:
                original_url = await self.url_repository.get_original_url(db, key)
        except RepositoryError as e:
            logger.error(f"Error resolving key '{key}': {e}")
            raise StorageError("Failed to retrieve original URL") from e

        if original_url is None:
            raise NotFoundError(f"Short URL '{key}' not found")
        return original_url

    async def _find_key(self, original_url: str) -> Optional[str]:
        try:
            async with self.session_manager.session() as db:
                mapping = await self.url_repository.get_by_original_url(db, original_url)
        except RepositoryError as e:
            logger.error(f"Error checking for existing short URL: {e}")
            raise StorageError("Failed to check for existing short URL") from e

        return mapping.key if mapping is not None else None

    async def _fetch_existing_keys(self) -> Set[str]:
        try:
            async with self.session_manager.session() as db:
                return await self.url_repository.get_existing_keys(db)
        except RepositoryError as e:
            logger.error(f"Error fetching existing keys: {e}")
            raise StorageError("Failed to fetch existing keys") from e

    def normalize_original_url(self, original_url) -> str:
        """
        Check that a URL was supplied and normalize surrounding whitespace.

        Args:
            original_url: Value received from the caller

        Returns:
            str: The stripped URL

        Raises:
            ValidationError: If the value is not a non-empty string within the size limit
        """
        if not isinstance(original_url, str):
            raise ValidationError("original_url must be a string")

        original_url = original_url.strip()
        if not original_url:
            raise ValidationError("original_url must not be empty")
        try:
            size = len(original_url.encode("utf-8"))
        except UnicodeEncodeError as e:
            raise ValidationError("original_url is not valid UTF-8 text") from e
        if size > self.max_url_bytes:
            raise ValidationError(
                f"original_url must be at most {self.max_url_bytes} bytes"
            )
        return original_url
