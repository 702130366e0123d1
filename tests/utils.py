"""Test utilities for URL shortener tests."""

import random
import string
from typing import Optional

from shorturl.models.url import ShortURL
from shorturl.services.keygen import KEY_ALPHABET, KEY_LENGTH


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_key() -> str:
    """Generate a key in the production format."""
    return ''.join(random.choice(KEY_ALPHABET) for _ in range(KEY_LENGTH))


def random_url() -> str:
    """Generate a random URL for testing."""
    domain = f"{random_string(8)}.com"
    path = random_string(12)
    return f"https://{domain}/{path}"


def is_well_formed_key(key: str) -> bool:
    """Check length and alphabet of a generated key."""
    return len(key) == KEY_LENGTH and all(char in KEY_ALPHABET for char in key)


async def create_test_url(
    db,
    original_url: Optional[str] = None,
    key: Optional[str] = None,
) -> ShortURL:
    """Create and persist a test ShortURL in the database."""
    url = ShortURL(
        original_url=original_url or random_url(),
        key=key or random_key(),
    )
    db.add(url)
    await db.commit()
    await db.refresh(url)
    return url
