"""Integration tests for the main application."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from swagger_gateway.dependencies import get_http_client, get_schema
from swagger_gateway.main import app
from swagger_gateway.schema.loader import parse_schema


class Backend:
    """Records backend calls and answers with a canned response."""

    def __init__(self, response: httpx.Response | None = None, error: Exception | None = None):
        self.response = response or httpx.Response(200, json=[])
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def backend() -> Backend:
    return Backend()


@pytest.fixture
def client(users_schema, backend):
    """TestClient wired to the example schema and a mock backend."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(backend))

    async def mock_get_schema():
        return users_schema

    async def mock_http_client():
        return http_client

    app.dependency_overrides[get_schema] = mock_get_schema
    app.dependency_overrides[get_http_client] = mock_http_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "app": "Swagger Gateway"}


class TestProxy:
    """End-to-end proxying through the gateway."""

    def test_success_is_relayed(self, client, backend):
        """Backend status, content type and body pass through unchanged."""
        backend.response = httpx.Response(200, json={"name": "Ann"})

        response = client.get("/api/v1/acme/users/7", headers={"X-Trace-Tag": "t1"})

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {"name": "Ann"}

        sent = backend.requests[0]
        assert sent.method == "GET"
        assert sent.url.path == "/api/v1/acme/users/7"
        assert sent.headers["X-Trace-Tag"] == "t1"

    def test_query_parameters_are_coerced(self, client, backend):
        response = client.get("/api/v1/acme/users", params={"limit": "05", "active": "true", "other": "x"})

        assert response.status_code == 200
        sent = backend.requests[0]
        assert dict(sent.url.params) == {"limit": "5", "active": "true"}

    def test_request_id_is_forwarded(self, client, backend):
        client.get("/api/v1/acme/users", headers={"X-Request-ID": "req-42"})

        assert backend.requests[0].headers["X-Request-ID"] == "req-42"

    def test_body_is_projected(self, client, backend):
        """Only declared body properties reach the backend."""
        backend.response = httpx.Response(201, json={"name": "Ann"})

        response = client.post(
            "/api/v1/acme/users",
            json={"name": "Ann", "email": "ann@example.com", "is_admin": True},
        )

        assert response.status_code == 201
        assert json.loads(backend.requests[0].content) == {
            "name": "Ann",
            "email": "ann@example.com",
        }

    def test_body_fields_win_over_query_arguments(self, client, backend):
        backend.response = httpx.Response(201, json={"name": "Ann"})

        client.post("/api/v1/acme/users?name=Bob", json={"name": "Ann"})

        assert json.loads(backend.requests[0].content) == {"name": "Ann"}

    def test_path_values_are_decoded_once(self, client, backend):
        """An escaped percent sign reaches the backend still escaped."""
        response = client.get("/api/v1/100%2541/users")

        assert response.status_code == 200
        assert backend.requests[0].url.raw_path == b"/api/v1/100%2541/users"

    def test_encoded_slash_stays_in_one_segment(self, client, backend):
        response = client.get("/api/v1/a%2Fb/users")

        assert response.status_code == 200
        assert backend.requests[0].url.raw_path == b"/api/v1/a%2Fb/users"

    def test_unvalidated_reply_is_streamed(self, client, backend, monkeypatch):
        """A reply with no declared schema is streamed as it arrives."""
        monkeypatch.setenv("STREAM_UNVALIDATED_RESPONSES", "true")
        backend.response = httpx.Response(
            202, content=b"queued", headers={"content-type": "text/plain"}
        )

        response = client.delete("/api/v1/acme/users/7")

        assert response.status_code == 202
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "queued"

    def test_missing_required_body_field(self, client, backend):
        response = client.post("/api/v1/acme/users", json={"email": "ann@example.com"})

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "schema violation in body, missing required field 'name'"
        assert backend.requests == []

    def test_invalid_parameter_type(self, client, backend):
        response = client.get("/api/v1/acme/users/seven")

        assert response.status_code == 400
        assert response.text == "wrong type for parameter 'user_id', expected 'integer', got '\"seven\"'"
        assert backend.requests == []

    def test_backend_unreachable(self, client, backend):
        backend.error = httpx.ConnectError("refused")

        response = client.get("/api/v1/acme/users")

        assert response.status_code == 500
        assert response.text == "server error"

    def test_backend_timeout(self, client, backend):
        backend.error = httpx.ReadTimeout("upstream stalled at 10.0.0.7")

        response = client.get("/api/v1/acme/users")

        assert response.status_code == 500
        assert response.text == "server error"

    def test_response_schema_violation(self, client, backend):
        backend.response = httpx.Response(200, json=[{"email": "ann@example.com"}])

        response = client.get("/api/v1/acme/users")

        assert response.status_code == 400
        assert response.text.startswith("schema violation: 'name' is a required property")

    def test_malformed_json_body(self, client):
        response = client.post(
            "/api/v1/acme/users",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_REQUEST_BODY"


class TestRouting:
    """Requests that don't resolve to an operation."""

    def test_unknown_path(self, client):
        response = client.get("/api/v1/acme/groups")

        assert response.status_code == 404
        assert response.json()["error"] == "ENDPOINT_NOT_FOUND"

    def test_undeclared_method(self, client):
        response = client.patch("/api/v1/acme/users")

        assert response.status_code == 405
        assert response.json()["error"] == "OPERATION_NOT_FOUND"


def test_missing_required_parameter(backend):
    """A required path parameter the pipeline can't supply is a 400."""
    schema = parse_schema({
        "swagger": "2.0",
        "host": "backend:8000",
        "paths": {
            "/reports": {
                "get": {
                    "parameters": [{"name": "id", "in": "path", "required": True, "type": "string"}],
                },
            },
        },
    })
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(backend))

    async def mock_get_schema():
        return schema

    async def mock_http_client():
        return http_client

    app.dependency_overrides[get_schema] = mock_get_schema
    app.dependency_overrides[get_http_client] = mock_http_client
    try:
        response = TestClient(app).get("/reports")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 400
    assert response.text == "missing required parameter 'id'"
    assert backend.requests == []
