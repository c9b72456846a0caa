"""E2E fixtures

Runs the real FirestoreGateway against the Firestore emulator.

Requires FIRESTORE_EMULATOR_HOST, e.g.
  FIRESTORE_EMULATOR_HOST=localhost:8080 pytest tests/e2e/ -m e2e -v
"""

from __future__ import annotations

import os

import pytest
from google.cloud import firestore
from sgrvias.adapters.firestore_gateway import FirestoreGateway
from sgrvias.adapters.schema import REQUESTS_TABLE, USERS_TABLE, ZONES_TABLE


@pytest.fixture(scope="session")
def firestore_client():
    """Emulator client shared across the session"""
    if not os.environ.get("FIRESTORE_EMULATOR_HOST"):
        pytest.skip("FIRESTORE_EMULATOR_HOST is not set")
    return firestore.Client(project="test-project")


@pytest.fixture(autouse=True)
def _cleanup_firestore(request, firestore_client):
    """Empty the emulator collections after each e2e test"""
    yield
    if not request.node.get_closest_marker("e2e"):
        return
    for collection_name in (REQUESTS_TABLE, USERS_TABLE, ZONES_TABLE):
        for doc in firestore_client.collection(collection_name).stream():
            doc.reference.delete()


@pytest.fixture
def gateway(firestore_client) -> FirestoreGateway:
    return FirestoreGateway(firestore_client, timeout=5.0)
