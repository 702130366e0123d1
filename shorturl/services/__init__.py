"""Service layer for the URL shortener application.

This package contains the business logic of the application: key
generation and the lookup-or-create protocol on top of the repositories.
"""

from shorturl.services.keygen import KeyGenerator
from shorturl.services.shortener import ShortenedURLService

__all__ = ["KeyGenerator", "ShortenedURLService"]
