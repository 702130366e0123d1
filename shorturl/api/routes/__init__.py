"""Routes package initialization.

This module exports the route collection for the application.
"""

from fastapi import APIRouter

from shorturl.api.routes import shortener, redirect, health
from shorturl.core.config import settings

# Create root router
api_router = APIRouter()

# Shortening lives at the root path: POST /
api_router.include_router(
    shortener.router
)

# Include health check routes with API prefix
api_router.include_router(
    health.router,
    prefix=settings.API_PREFIX
)

# Include redirect routes last; /{key} matches any single path segment
api_router.include_router(
    redirect.router
)

__all__ = ["api_router"]
