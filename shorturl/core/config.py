"""Application configuration module.

This module contains settings for the URL shortener service,
loaded from environment variables with appropriate defaults.
"""

from __future__ import annotations

import string
from enum import Enum
from typing import Any, Optional

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with defaults.

    Settings are loaded from environment variables, with fallback to
    values in .env file if present, and finally to the default values
    specified here.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment setting
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # App Information
    APP_NAME: str = "shorturl"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Shortens long URLs into six character keys and redirects them back"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    API_PREFIX: str = "/api"
    DEBUG: bool = False

    # Key generation
    KEY_LENGTH: int = Field(default=6, ge=1, le=20)  # short_urls.key is VARCHAR(20)
    KEY_ALPHABET: str = string.digits + string.ascii_lowercase + string.ascii_uppercase
    KEY_ALLOCATION_ATTEMPTS: int = Field(default=5, ge=1)  # Inserts tried before giving up on a key
    # UTF-8 bytes; PostgreSQL btree index entries on original_url are capped near 2.7 kB
    ORIGINAL_URL_MAX_BYTES: int = Field(default=2048, ge=1, le=2600)

    # Database connection. DATABASE_URL wins over the individual POSTGRES_* parts.
    DATABASE_URL: Optional[str] = None
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "shorturl"

    # PostgreSQL pool settings
    POSTGRES_POOL_SIZE: int = 20
    POSTGRES_POOL_MAX_OVERFLOW: int = 10
    POSTGRES_POOL_TIMEOUT: int = 30
    POSTGRES_POOL_RECYCLE: int = 300
    DB_ECHO: bool = False

    # Database connection resilience settings
    DB_CONNECT_RETRY_ATTEMPTS: int = 5  # Max number of connection attempts during startup
    DB_CONNECT_RETRY_INITIAL_DELAY: float = 1.0  # Initial delay in seconds
    DB_CONNECT_RETRY_MAX_DELAY: float = 30.0  # Maximum delay in seconds
    DB_CONNECT_RETRY_JITTER: float = 0.1  # Jitter factor (0.0-1.0)

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "shorturl.log"
    LOG_FILE_ENABLED: bool = True
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name}:{function}:{line} | {message}"
    LOG_JSON: bool = True
    REQUEST_LOGGING_ENABLED: bool = True

    # Validators
    @field_validator("KEY_ALPHABET")
    def validate_key_alphabet(cls, v: str) -> str:
        if not v:
            raise ValueError("KEY_ALPHABET must not be empty")
        if len(set(v)) != len(v):
            raise ValueError("KEY_ALPHABET must not contain duplicate characters")
        return v

    @field_validator("DATABASE_URL", mode="before")
    def validate_database_url(cls, v: Any) -> Optional[str]:
        """Treat an empty DATABASE_URL as unset."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    # Computed fields
    @computed_field
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Construct the async SQLAlchemy database URI.

        A plain ``postgres://`` or ``postgresql://`` DATABASE_URL, as handed
        out by most hosting providers, is rewritten to the asyncpg driver.
        """
        if self.DATABASE_URL:
            url = self.DATABASE_URL
            for scheme in ("postgres://", "postgresql://"):
                if url.startswith(scheme):
                    return "postgresql+asyncpg://" + url[len(scheme):]
            return url

        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"


# Create a singleton instance of the settings
settings = Settings()
