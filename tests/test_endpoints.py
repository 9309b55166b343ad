"""Tests for API endpoints."""

import httpx
import pytest
from fastapi.testclient import TestClient

from unillm import __version__
from unillm.api.endpoints import get_http_client
from unillm.main import app


def mock_upstream(status_code: int = 200, payload: dict | None = None) -> httpx.AsyncClient:
    body = payload if payload is not None else {"choices": [{"message": {"content": "Hello from grok"}}]}
    return httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(status_code, json=body)))


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_check(self, client):
        """Test that health check returns status and version."""
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert "timestamp" in data


class TestChatEndpoint:
    """Tests for the chat endpoint."""

    def test_chat_success(self, client, monkeypatch):
        """Test that a chat request returns the model text."""
        monkeypatch.setenv("XAI_API_KEY", "test-key")
        app.dependency_overrides[get_http_client] = lambda: mock_upstream()

        response = client.post(
            "/v1/chat",
            json={"model": "xai:grok-2-latest", "messages": [{"role": "user", "content": "Hi"}]},
        )

        assert response.status_code == 200
        assert response.json() == {"model": "xai:grok-2-latest", "response": "Hello from grok"}

    def test_missing_key_is_401(self, client, monkeypatch):
        """Test that missing credentials map to 401."""
        monkeypatch.delenv("XAI_API_KEY", raising=False)
        app.dependency_overrides[get_http_client] = lambda: mock_upstream()

        response = client.post("/v1/chat", json={"model": "xai", "messages": [{"role": "user", "content": "Hi"}]})
        assert response.status_code == 401

    def test_unknown_backend_is_400(self, client):
        """Test that unknown backends map to 400."""
        response = client.post("/v1/chat", json={"model": "nope:x", "messages": []})
        assert response.status_code == 400

    def test_system_role_rejected(self, client):
        """Test that system is not accepted as a message role."""
        response = client.post(
            "/v1/chat", json={"model": "xai", "messages": [{"role": "system", "content": "You are..."}]}
        )
        assert response.status_code == 422

    def test_upstream_error_is_502(self, client, monkeypatch):
        """Test that vendor failures map to 502."""
        monkeypatch.setenv("XAI_API_KEY", "test-key")
        app.dependency_overrides[get_http_client] = lambda: mock_upstream(500, {"error": "boom"})

        response = client.post("/v1/chat", json={"model": "xai", "messages": [{"role": "user", "content": "Hi"}]})
        assert response.status_code == 502
        assert "500" in response.json()["detail"]
