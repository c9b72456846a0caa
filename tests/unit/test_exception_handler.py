"""Global exception handler tests

Unhandled exceptions become a 500 JSON response that still carries CORS
headers.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sgrvias.entrypoints.api.app import app
from sgrvias.entrypoints.api.deps import get_store
from sgrvias.services.domain_store import DomainStore

_ORIGIN = "http://localhost:3000"


@pytest.fixture
def client_with_broken_store():
    """Store whose snapshot() raises RuntimeError"""
    broken_store = MagicMock(spec=DomainStore)
    broken_store.snapshot.side_effect = RuntimeError("snapshot unavailable")

    app.dependency_overrides[get_store] = lambda: broken_store

    # raise_server_exceptions=False so the 500 comes back as a response
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def normal_client(store):
    app.dependency_overrides[get_store] = lambda: store

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


class TestUnhandledExceptionHandler:
    def test_500_returns_json(self, client_with_broken_store):
        response = client_with_broken_store.get(
            "/api/requests",
            headers={"Origin": _ORIGIN},
        )
        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}

    def test_500_has_cors_header(self, client_with_broken_store):
        response = client_with_broken_store.get(
            "/api/requests",
            headers={"Origin": _ORIGIN},
        )
        assert response.status_code == 500
        assert "access-control-allow-origin" in response.headers

    def test_normal_request_unaffected(self, normal_client):
        response = normal_client.get(
            "/api/requests",
            headers={"Origin": _ORIGIN},
        )
        assert response.status_code == 200
        assert "access-control-allow-origin" in response.headers

    def test_health(self, normal_client):
        assert normal_client.get("/health").json() == {"status": "ok"}
