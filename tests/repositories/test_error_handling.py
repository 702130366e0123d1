"""Tests for repository error handling."""

import pytest
from unittest.mock import patch
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from shorturl.repositories.url_repository import RepositoryError, is_key_conflict
from shorturl.repositories.base import DuplicateEntityError
from tests.utils import random_url


def make_integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT INTO short_urls ...", {}, Exception(message))


@pytest.mark.repository
class TestRepositoryErrorHandling:
    """Tests for error handling in repositories."""

    @pytest.mark.asyncio
    async def test_database_error_handling(self, test_db, url_repository):
        """Test handling of database errors."""
        with patch.object(test_db, 'execute', side_effect=SQLAlchemyError("Test database error")):
            with pytest.raises(RepositoryError) as excinfo:
                await url_repository.get_by_key(test_db, "errtst")

            assert "Test database error" in str(excinfo.value)
            assert isinstance(excinfo.value.__cause__, SQLAlchemyError)

    @pytest.mark.asyncio
    async def test_original_url_lookup_error(self, test_db, url_repository):
        with patch.object(test_db, 'execute', side_effect=OperationalError("SELECT", {}, Exception("gone"))):
            with pytest.raises(RepositoryError):
                await url_repository.get_by_original_url(test_db, random_url())
            with pytest.raises(RepositoryError):
                await url_repository.get_original_url(test_db, "abc123")
            with pytest.raises(RepositoryError):
                await url_repository.get_existing_keys(test_db)

    @pytest.mark.asyncio
    async def test_non_key_integrity_error_is_not_a_duplicate(self, test_db, url_repository):
        """Only the key constraint is reported as a duplicate."""
        error = make_integrity_error("NOT NULL constraint failed: short_urls.original_url")
        with patch.object(test_db, 'flush', side_effect=error):
            with pytest.raises(RepositoryError) as excinfo:
                await url_repository.create_mapping(test_db, "abc123", random_url())

        assert not isinstance(excinfo.value, DuplicateEntityError)

    @pytest.mark.asyncio
    async def test_operational_error_on_create(self, test_db, url_repository):
        error = OperationalError("INSERT", {}, Exception("database is locked"))
        with patch.object(test_db, 'flush', side_effect=error):
            with pytest.raises(RepositoryError) as excinfo:
                await url_repository.create_mapping(test_db, "abc123", random_url())

        assert not isinstance(excinfo.value, DuplicateEntityError)

    @pytest.mark.asyncio
    async def test_get_first_by_requires_filters(self, test_db, url_repository):
        with pytest.raises(ValueError):
            await url_repository.get_first_by(test_db)


@pytest.mark.parametrize(
    "message, expected",
    [
        ("UNIQUE constraint failed: short_urls.key", True),
        ('duplicate key value violates unique constraint "uq_short_urls_key"\n'
         "DETAIL:  Key (key)=(abc123) already exists.", True),
        ("NOT NULL constraint failed: short_urls.key", False),
        ('duplicate key value violates unique constraint "short_urls_pkey"\n'
         "DETAIL:  Key (id)=(1) already exists.", False),
    ],
)
def test_is_key_conflict(message, expected):
    assert is_key_conflict(make_integrity_error(message)) is expected
