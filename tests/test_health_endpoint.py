"""Tests for the /health endpoint."""

from collections.abc import Generator
from http import HTTPStatus
from typing import Any

import pytest
from starlette.testclient import TestClient

from rosa_mcp import __version__
from rosa_mcp.config import RosaMCPConfig, TransportMode
from rosa_mcp.server import RosaMCPServer


@pytest.fixture
def health_client() -> Generator[tuple[RosaMCPServer, TestClient], Any, None]:
    """Create a server + MCP wired for health-endpoint testing."""
    server = RosaMCPServer(RosaMCPConfig(transport=TransportMode.STREAMABLE_HTTP))
    mcp = server.create_mcp()
    app = mcp.streamable_http_app()
    with TestClient(app) as client:
        yield server, client


def test_health_endpoint_returns_200(
    health_client: tuple[RosaMCPServer, TestClient],
) -> None:
    """Test that /health returns 200 once the tool registry is built."""
    _, client = health_client

    response = client.get("/health")

    assert response.status_code == HTTPStatus.OK  # 200
    data = response.json()

    assert data["status"] == "healthy"
    assert data["version"] == __version__
    assert data["transport"] == "streamable-http"
    assert data["tools"] == 5


def test_health_endpoint_without_registry(
    health_client: tuple[RosaMCPServer, TestClient],
) -> None:
    """Test health endpoint when the tool registry is missing."""
    server, client = health_client
    server._registry = None

    response = client.get("/health")

    assert response.status_code == HTTPStatus.SERVICE_UNAVAILABLE  # 503
    data = response.json()

    assert data["status"] == "unhealthy"
    assert data["tools"] == 0


def test_health_endpoint_needs_no_credentials(
    health_client: tuple[RosaMCPServer, TestClient],
) -> None:
    """Liveness never resolves an OCM credential."""
    _, client = health_client

    response = client.get("/health", headers={"Authorization": "Basic nonsense"})

    assert response.status_code == HTTPStatus.OK
