"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization.
"""

from typing import Optional

from pydantic import BaseModel, StrictStr


class URLCreateRequest(BaseModel):
    """Request schema for shortening a URL."""
    original_url: StrictStr


class URLResponse(BaseModel):
    """Response schema for a shortened URL."""
    original_url: str
    short_url: str  # The short key


class ErrorResponse(BaseModel):
    """Response schema for errors."""
    error: str
    error_id: Optional[str] = None
