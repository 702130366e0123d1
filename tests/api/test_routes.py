"""Tests for the HTTP interface."""

from unittest.mock import patch

import pytest

from shorturl.repositories.base import RepositoryError
from shorturl.repositories.url_repository import URLRepository
from shorturl.services.exceptions import KeyExhaustionError
from shorturl.services.keygen import KeyGenerator
from tests.utils import is_well_formed_key


@pytest.mark.api
class TestShortenEndpoint:

    def test_shorten_and_redirect(self, client):
        response = client.post("/", json={"original_url": "https://example.com"})

        assert response.status_code == 200
        body = response.json()
        assert body["original_url"] == "https://example.com"
        assert is_well_formed_key(body["short_url"])

        repeat = client.post("/", json={"original_url": "https://example.com"})
        assert repeat.status_code == 200
        assert repeat.json()["short_url"] == body["short_url"]

        redirect = client.get(f"/{body['short_url']}", follow_redirects=False)
        assert redirect.status_code == 301
        assert redirect.headers["location"] == "https://example.com"

    def test_distinct_urls(self, client):
        first = client.post("/", json={"original_url": "https://one.example"}).json()
        second = client.post("/", json={"original_url": "https://two.example"}).json()

        assert first["short_url"] != second["short_url"]

    def test_response_echoes_normalized_url(self, client):
        response = client.post("/", json={"original_url": "  https://pad.example  "})

        assert response.status_code == 200
        body = response.json()
        assert body["original_url"] == "https://pad.example"

        redirect = client.get(f"/{body['short_url']}", follow_redirects=False)
        assert redirect.headers["location"] == body["original_url"]

    def test_extra_fields_are_ignored(self, client):
        response = client.post("/", json={"original_url": "https://example.com", "custom": "x"})
        assert response.status_code == 200

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"url": "https://example.com"},
            {"original_url": None},
            {"original_url": 42},
            {"original_url": ["https://example.com"]},
            {"original_url": ""},
            {"original_url": "   "},
        ],
    )
    def test_invalid_input(self, client, payload):
        response = client.post("/", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid input"}

    def test_malformed_json(self, client):
        response = client.post(
            "/",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid input"}

    def test_storage_failure_is_hidden(self, client):
        with patch.object(URLRepository, "get_by_original_url", side_effect=RepositoryError("boom")):
            response = client.post("/", json={"original_url": "https://example.com"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create short URL"}
        assert "boom" not in response.text

    def test_insert_failure(self, client):
        with patch.object(URLRepository, "create_mapping", side_effect=RepositoryError("disk full")):
            response = client.post("/", json={"original_url": "https://example.com"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create short URL"}

    def test_key_exhaustion(self, client):
        with patch.object(KeyGenerator, "generate", side_effect=KeyExhaustionError("keyspace full")):
            response = client.post("/", json={"original_url": "https://example.com"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create short URL"}


@pytest.mark.api
class TestRedirectEndpoint:

    def test_unknown_key(self, client):
        response = client.get("/zzzzzz", follow_redirects=False)

        assert response.status_code == 404
        assert response.json() == {"error": "Short URL not found"}

    def test_redirect_preserves_query(self, client):
        target = "https://example.com/search?q=short+links&page=2"
        key = client.post("/", json={"original_url": target}).json()["short_url"]

        response = client.get(f"/{key}", follow_redirects=False)

        assert response.status_code == 301
        assert response.headers["location"] == target

    def test_storage_failure(self, client):
        with patch.object(URLRepository, "get_original_url", side_effect=RepositoryError("timeout")):
            response = client.get("/abc123", follow_redirects=False)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to retrieve original URL"}
        assert "timeout" not in response.text


@pytest.mark.api
class TestHealthEndpoints:

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["environment"] == "testing"
        assert body["components"]["database"]["status"] == "healthy"

    def test_liveness(self, client):
        response = client.get("/api/health/live")

        assert response.status_code == 200
        assert response.json() == {"alive": True}


@pytest.mark.api
def test_request_id_header(client):
    response = client.get("/api/health/live")
    assert response.headers.get("X-Request-ID")

    echoed = client.get("/api/health/live", headers={"X-Request-ID": "req-123"})
    assert echoed.headers["X-Request-ID"] == "req-123"
