"""Main application module.

This module builds the FastAPI application, includes routes,
and configures middleware, exception handlers and the lifespan that
owns the database engine.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from shorturl.api import api_router
from shorturl.core.config import settings
from shorturl.core.logging import setup_logging
from shorturl.db.resilience import initialize_database_connection
from shorturl.db.session import SessionManager
from shorturl.middleware.logging import RequestLoggingMiddleware
from shorturl.services.keygen import KeyGenerator


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect to the database and create the schema; dispose the pool on shutdown."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT.value}")

    session_manager: SessionManager = app.state.session_manager
    if not await initialize_database_connection(session_manager):
        await session_manager.dispose()
        raise RuntimeError("Database is unreachable, refusing to start")
    await session_manager.create_schema()

    try:
        yield
    finally:
        logger.info(f"Shutting down {settings.APP_NAME}")
        await session_manager.dispose()


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are reported as a plain 400."""
    logger.info(f"Request validation error on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid input"}
    )


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to catch and log all unhandled exceptions."""
    error_id = f"error-{time.time()}"

    logger.opt(exception=exc).error(
        "Unhandled exception in {method} {path}",
        error_id=error_id,
        url=str(request.url),
        method=request.method,
        path=request.url.path,
        path_params=request.path_params,
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "error_id": error_id,
        }
    )


def create_app(
    session_manager: Optional[SessionManager] = None,
    key_generator: Optional[KeyGenerator] = None,
) -> FastAPI:
    """Build the application.

    Args:
        session_manager: Storage client, built from settings when omitted
        key_generator: Key source, built from settings when omitted

    Returns:
        FastAPI: The configured application
    """
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    app.state.session_manager = session_manager or SessionManager.from_url()
    app.state.key_generator = key_generator or KeyGenerator(
        alphabet=settings.KEY_ALPHABET,
        length=settings.KEY_LENGTH,
    )

    if settings.REQUEST_LOGGING_ENABLED:
        app.add_middleware(RequestLoggingMiddleware)

    app.include_router(api_router)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    return app
