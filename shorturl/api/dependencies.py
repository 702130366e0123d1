"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access the storage client and service instances.
"""

from fastapi import Depends, Request

from shorturl.core.config import settings
from shorturl.db.base import DatabaseHealthCheck
from shorturl.db.session import SessionManager
from shorturl.repositories.url_repository import URLRepository
from shorturl.services.keygen import KeyGenerator
from shorturl.services.shortener import ShortenedURLService


def get_session_manager(request: Request) -> SessionManager:
    """Get the storage client created for this application."""
    return request.app.state.session_manager


def get_key_generator(request: Request) -> KeyGenerator:
    """Get the key generator shared by this application."""
    return request.app.state.key_generator


async def get_url_repository():
    """Get an instance of the URL repository."""
    return URLRepository()


async def get_shortener_service(
    session_manager: SessionManager = Depends(get_session_manager),
    url_repo: URLRepository = Depends(get_url_repository),
    key_generator: KeyGenerator = Depends(get_key_generator),
) -> ShortenedURLService:
    """Get an instance of the URL shortening service."""
    return ShortenedURLService(
        session_manager=session_manager,
        url_repository=url_repo,
        key_generator=key_generator,
        max_attempts=settings.KEY_ALLOCATION_ATTEMPTS,
        max_url_bytes=settings.ORIGINAL_URL_MAX_BYTES,
    )


async def get_health_check(
    session_manager: SessionManager = Depends(get_session_manager),
) -> DatabaseHealthCheck:
    """Get a database health checker bound to the storage client."""
    return DatabaseHealthCheck(session_manager)
