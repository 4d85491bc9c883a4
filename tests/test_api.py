# =============================================================================
# tests/test_api.py - HTTP Surface Tests
# =============================================================================
# Drives the assembled application through TestClient.
# Covers:
#   - Health, readiness, root greeting and favicon
#   - User registration
#   - Request IDs and the HTML 404 page
#   - CORS preflight
#   - Error envelopes for validation, AppError and unhandled exceptions
#
# Run with: pytest tests/test_api.py -v
# =============================================================================

import uuid

import pytest
from fastapi.testclient import TestClient

from app.exceptions import DatabaseError, FileTooLargeError
from app.main import create_app
from core.config import AppConfig
from core.response import ErrorCode


def assert_envelope(body: dict) -> None:
    assert set(body) == {"code", "msg", "data", "timestamp"}


# =============================================================================
# Health & Root
# =============================================================================

class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert_envelope(body)
        assert body["code"] == 0
        assert body["msg"] == "Success"
        assert body["data"] == {"status": "healthy"}

    def test_readiness_without_cache(self, client):
        response = client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "ready"
        assert data["checks"] == {"database": "healthy", "cache": "disabled"}

    def test_hello_world(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["data"] == {"message": "Hello, World!"}

    def test_favicon(self, client):
        response = client.get("/favicon.ico")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/x-icon"
        assert response.content.startswith(b"\x89PNG")


# =============================================================================
# Registration
# =============================================================================

class TestRegister:

    def test_register(self, client):
        response = client.post("/v1/auth/register", json="alice")

        assert response.status_code == 201
        body = response.json()
        assert body["code"] == 0
        assert body["data"] == "alice"

    def test_register_strips_whitespace(self, client):
        response = client.post("/v1/auth/register", json="  bob  ")
        assert response.json()["data"] == "bob"

    def test_blank_name_is_rejected(self, client):
        response = client.post("/v1/auth/register", json="   ")

        assert response.status_code == 400
        body = response.json()
        assert_envelope(body)
        assert body["code"] == ErrorCode.VALIDATION
        assert body["msg"] == "Username must not be empty"
        assert body["data"] is None

    def test_non_string_body_is_rejected(self, client):
        response = client.post("/v1/auth/register", json={"username": "alice"})

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == ErrorCode.VALIDATION
        assert body["msg"].startswith("Validation error")
        assert body["data"] is None

    def test_missing_body_is_rejected(self, client):
        response = client.post("/v1/auth/register")
        assert response.status_code == 422

    def test_get_is_not_allowed(self, client):
        response = client.get("/v1/auth/register")

        assert response.status_code == 405
        assert response.json()["code"] == 405


# =============================================================================
# Request ID & 404
# =============================================================================

class TestRequestId:

    def test_every_response_has_a_request_id(self, client):
        response = client.get("/health")

        request_id = response.headers["x-request-id"]
        assert uuid.UUID(request_id).version == 4

    def test_ids_differ_per_request(self, client):
        first = client.get("/health").headers["x-request-id"]
        second = client.get("/health").headers["x-request-id"]
        assert first != second

    def test_client_id_is_replaced(self, client):
        response = client.get("/health", headers={"X-Request-ID": "client-chosen"})
        assert response.headers["x-request-id"] != "client-chosen"


class TestNotFound:

    def test_unknown_path_renders_html(self, client):
        response = client.get("/no/such/page")

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("text/html")
        assert "404" in response.text
        assert "/no/such/page" in response.text

    def test_page_shows_request_id(self, client):
        response = client.get("/missing")

        assert response.headers["x-request-id"] in response.text

    def test_path_is_escaped(self, client):
        response = client.get("/<script>alert(1)</script>")

        assert "<script>alert(1)</script>" not in response.text

    def test_docs_hidden_outside_debug(self, client):
        assert client.get("/docs").status_code == 404
        assert client.get("/openapi.json").status_code == 404


class TestDebugMode:

    def test_docs_served_in_debug(self, tmp_path):
        config = AppConfig()
        config.database.url = f"sqlite:///{tmp_path / 'debug.db'}"
        config.secrets.jwt_secret = "test-secret"
        config.logging.level = "debug"
        config.freeze()

        with TestClient(create_app(config)) as client:
            assert client.get("/docs").status_code == 200
            assert client.get("/openapi.json").json()["info"]["title"] == "DropBuddy API"


# =============================================================================
# CORS
# =============================================================================

class TestCors:

    def test_preflight(self, client):
        response = client.options(
            "/health",
            headers={
                "Origin": "https://app.example.com",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-max-age"] == "3600"

    def test_simple_request_exposes_headers(self, client):
        response = client.get("/health", headers={"Origin": "https://app.example.com"})

        assert response.headers["access-control-allow-origin"] == "*"
        assert "X-Total-Count" in response.headers["access-control-expose-headers"]

    def test_restricted_origins(self, tmp_path):
        config = AppConfig()
        config.database.url = f"sqlite:///{tmp_path / 'cors.db'}"
        config.secrets.jwt_secret = "test-secret"
        config.cors.allow_origins = ["https://app.example.com"]
        config.cors.allow_credentials = True
        config.freeze()

        with TestClient(create_app(config)) as client:
            allowed = client.get("/health", headers={"Origin": "https://app.example.com"})
            denied = client.get("/health", headers={"Origin": "https://evil.example.com"})

        assert allowed.headers["access-control-allow-origin"] == "https://app.example.com"
        assert allowed.headers["access-control-allow-credentials"] == "true"
        assert "access-control-allow-origin" not in denied.headers


# =============================================================================
# Error Handling
# =============================================================================

@pytest.fixture
def failing_client(app):
    """Client with extra routes that raise."""

    async def raise_upload_error():
        raise FileTooLargeError(size=2048, max_size=1024)

    async def raise_database_error():
        raise DatabaseError("connection refused on 10.0.0.5")

    async def raise_unexpected():
        raise RuntimeError("kaboom")

    app.add_api_route("/test/upload", raise_upload_error)
    app.add_api_route("/test/database", raise_database_error)
    app.add_api_route("/test/crash", raise_unexpected)

    with TestClient(app) as test_client:
        yield test_client


class TestErrorHandling:

    def test_client_app_error(self, failing_client):
        response = failing_client.get("/test/upload")

        assert response.status_code == 413
        body = response.json()
        assert body["code"] == ErrorCode.FILE_TOO_LARGE
        assert "2048" in body["msg"]

    def test_server_app_error_hides_details(self, failing_client):
        response = failing_client.get("/test/database")

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == ErrorCode.DATABASE
        assert body["msg"] == "Database error"
        assert "10.0.0.5" not in response.text

    def test_unhandled_exception(self, failing_client):
        response = failing_client.get("/test/crash")

        assert response.status_code == 500
        body = response.json()
        assert_envelope(body)
        assert body["code"] == ErrorCode.INTERNAL
        assert body["msg"] == "Internal server error"
        assert "kaboom" not in response.text
        assert "x-request-id" in response.headers
