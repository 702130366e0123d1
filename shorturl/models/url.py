"""URL shortener data models.

This module defines the ShortURL model mapping short keys to original URLs.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, Text, UniqueConstraint, func
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching the column type."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ShortURLBase(SQLModel):
    """Base model for short URL data."""

    key: str = Field(
        max_length=20,
        nullable=False,
        description="Unique short key used in the redirect path",
    )
    original_url: str = Field(
        sa_type=Text,
        nullable=False,
        description="The original (long) URL to redirect to",
    )


class ShortURL(ShortURLBase, table=True):
    """
    Persisted mapping between a short key and an original URL.

    Rows are written once and never updated or deleted. The unique
    constraint on ``key`` is what detects two writers racing for the
    same key.
    """

    __tablename__ = "short_urls"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime,
        nullable=False,
        sa_column_kwargs={"server_default": func.now()},
        description="Timestamp when this mapping was created",
    )

    __table_args__ = (
        UniqueConstraint("key", name="uq_short_urls_key"),
        Index("ix_short_urls_original_url", "original_url"),
    )


class ShortURLCreate(ShortURLBase):
    """Schema for creating a new mapping."""
    pass
