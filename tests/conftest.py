"""Test fixtures for the URL shortener service."""

import os

# Settings are read at import time, so the test environment has to be in
# place before anything from shorturl is imported
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_FILE_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ.pop("DATABASE_URL", None)

import pytest
import pytest_asyncio
from typing import AsyncGenerator, Generator
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from shorturl.db.session import SessionManager
from shorturl.main import create_app
from shorturl.repositories.url_repository import URLRepository
from shorturl.services.keygen import KeyGenerator
from shorturl.services.shortener import ShortenedURLService
# Import models to ensure they're registered with SQLModel metadata
from shorturl.models.url import ShortURL  # noqa: F401


# Test database URL - using SQLite in-memory
TEST_SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def in_memory_session_manager() -> SessionManager:
    """Session manager over a private in-memory SQLite database."""
    return SessionManager.from_url(
        TEST_SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine with in-memory SQLite."""
    engine = create_async_engine(
        TEST_SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_manager(test_engine) -> SessionManager:
    """Storage client bound to the test engine."""
    return SessionManager(test_engine)


@pytest_asyncio.fixture
async def test_db(session_manager) -> AsyncGenerator[AsyncSession, None]:
    """Database session on the test engine."""
    async with session_manager.session() as session:
        yield session


@pytest.fixture
def url_repository() -> URLRepository:
    """Return a URL repository instance."""
    return URLRepository()


@pytest.fixture
def key_generator() -> KeyGenerator:
    """Key generator with the default alphabet and length."""
    return KeyGenerator()


@pytest.fixture
def shortener_service(session_manager, url_repository, key_generator) -> ShortenedURLService:
    """URL shortening service backed by the test engine."""
    return ShortenedURLService(
        session_manager=session_manager,
        url_repository=url_repository,
        key_generator=key_generator,
        max_attempts=3,
    )


@pytest.fixture
def test_app():
    """FastAPI app with its own in-memory database."""
    return create_app(session_manager=in_memory_session_manager())


@pytest.fixture
def client(test_app) -> Generator[TestClient, None, None]:
    """Return FastAPI TestClient instance; the lifespan creates the schema."""
    with TestClient(test_app) as test_client:
        yield test_client
