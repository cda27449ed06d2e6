"""Tests for Mindshare API health endpoint."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from mindshare.api.main import create_app


@pytest.fixture
def client() -> TestClient:
    """Create a test client for the Mindshare API."""
    return TestClient(create_app())


def test_health_returns_200(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200


def test_health_status_and_version(client: TestClient) -> None:
    """GET /health returns status 'ok' and the service version."""
    data = client.get("/health").json()

    assert data["status"] == "ok"
    assert data["version"] == "0.1.0"


def test_health_time_is_iso8601(client: TestClient) -> None:
    data = client.get("/health").json()
    parsed = datetime.fromisoformat(data["time"])
    assert parsed.tzinfo is not None


def test_health_includes_request_id_header(client: TestClient) -> None:
    """A request id is generated when the caller sends none."""
    response = client.get("/health")
    assert response.headers.get("X-Request-Id")


def test_health_echoes_incoming_request_id(client: TestClient) -> None:
    response = client.get("/health", headers={"X-Request-Id": "req-123"})
    assert response.headers["X-Request-Id"] == "req-123"


def test_blank_request_id_is_replaced(client: TestClient) -> None:
    response = client.get("/health", headers={"X-Request-Id": "   "})
    assert response.headers["X-Request-Id"].strip()
    assert response.headers["X-Request-Id"] != "   "


def test_unknown_route_uses_error_envelope(client: TestClient) -> None:
    response = client.get("/nope", headers={"X-Request-Id": "req-404"})
    data = response.json()

    assert response.status_code == 404
    assert data["code"] == "NOT_FOUND"
    assert data["request_id"] == "req-404"
