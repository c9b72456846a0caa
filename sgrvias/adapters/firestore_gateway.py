"""Firestore Persistence Gateway Adapter

PersistenceGateway implementation backed by Firestore.

Collection layout (one document per entity, document ID = entity id):
  repair_requests/{requestId}
  users/{userId}
  zonals/{zoneId}

Every call carries an explicit deadline (`timeout`). Any google-api-core
failure is surfaced as PersistenceError.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from google.api_core import exceptions as gexc
from google.cloud import firestore

from sgrvias.adapters.schema import (
    REQUESTS_TABLE,
    USERS_TABLE,
    ZONES_TABLE,
    request_to_row,
    row_to_request,
    row_to_user,
    row_to_zone,
    user_to_row,
    zone_to_row,
)
from sgrvias.domain.errors import PersistenceError
from sgrvias.domain.models import RepairRequest, User, ZoneMetadata
from sgrvias.domain.ports import PersistenceGateway

logger = logging.getLogger(__name__)


@contextmanager
def _storage_call(action: str) -> Iterator[None]:
    """Translate storage failures into PersistenceError"""
    try:
        yield
    except gexc.GoogleAPIError as e:
        logger.error("Firestore %s failed: %s", action, e)
        raise PersistenceError(f"Falha ao {action}: {e}") from e
    except (ConnectionError, TimeoutError) as e:
        logger.error("Firestore %s failed (connectivity): %s", action, e)
        raise PersistenceError(f"Falha de conexão ao {action}: {e}") from e


class FirestoreGateway(PersistenceGateway):
    """
    Firestore implementation of PersistenceGateway.

    Writes use create() / update() so that inserting an existing id or
    updating a missing one is rejected by the backend instead of silently
    turning into the other operation.
    """

    def __init__(self, db: firestore.Client, timeout: float = 10.0) -> None:
        """
        Args:
            db: initialized Firestore client
            timeout: deadline in seconds applied to every call
        """
        self._db = db
        self._timeout = timeout

    # ── repair_requests ──────────────────────────────────────────────────────

    def list_requests(self) -> list[RepairRequest]:
        """All requests ordered by created_at, newest first"""
        with _storage_call("carregar solicitações"):
            snaps = (
                self._db.collection(REQUESTS_TABLE)
                .order_by("created_at", direction=firestore.Query.DESCENDING)
                .stream(timeout=self._timeout)
            )
            rows = [{**(snap.to_dict() or {}), "id": snap.id} for snap in snaps]
        return [row_to_request(row) for row in rows]

    def create_request(self, request: RepairRequest) -> None:
        with _storage_call("criar solicitação"):
            self._db.collection(REQUESTS_TABLE).document(request.id).create(
                request_to_row(request), timeout=self._timeout
            )
        logger.info("Created request: id=%s", request.id)

    def update_request(self, request: RepairRequest) -> None:
        row = request_to_row(request)
        # created_at is fixed at creation
        del row["created_at"]
        with _storage_call("atualizar solicitação"):
            self._db.collection(REQUESTS_TABLE).document(request.id).update(
                row, timeout=self._timeout
            )
        logger.info("Updated request: id=%s, status=%s", request.id, request.status.value)

    def delete_request(self, request_id: str) -> None:
        with _storage_call("excluir solicitação"):
            self._db.collection(REQUESTS_TABLE).document(request_id).delete(
                timeout=self._timeout
            )
        logger.info("Deleted request: id=%s", request_id)

    # ── users ────────────────────────────────────────────────────────────────

    def list_users(self) -> list[User]:
        with _storage_call("carregar usuários"):
            snaps = self._db.collection(USERS_TABLE).stream(timeout=self._timeout)
            rows = [{**(snap.to_dict() or {}), "id": snap.id} for snap in snaps]
        return [row_to_user(row) for row in rows]

    def create_user(self, user: User) -> None:
        with _storage_call("criar usuário"):
            self._db.collection(USERS_TABLE).document(user.id).create(
                user_to_row(user), timeout=self._timeout
            )
        logger.info("Created user: id=%s, role=%s", user.id, user.role)

    def update_user(self, user: User) -> None:
        with _storage_call("atualizar usuário"):
            self._db.collection(USERS_TABLE).document(user.id).update(
                user_to_row(user), timeout=self._timeout
            )
        logger.info("Updated user: id=%s", user.id)

    def delete_user(self, user_id: str) -> None:
        with _storage_call("excluir usuário"):
            self._db.collection(USERS_TABLE).document(user_id).delete(
                timeout=self._timeout
            )
        logger.info("Deleted user: id=%s", user_id)

    # ── zonals ───────────────────────────────────────────────────────────────

    def list_zones(self) -> list[ZoneMetadata]:
        with _storage_call("carregar zonais"):
            snaps = self._db.collection(ZONES_TABLE).stream(timeout=self._timeout)
            rows = [{**(snap.to_dict() or {}), "id": snap.id} for snap in snaps]
        return [row_to_zone(row) for row in rows]

    def upsert_zone(self, zone: ZoneMetadata) -> None:
        with _storage_call("salvar zonal"):
            self._db.collection(ZONES_TABLE).document(zone.id.value).set(
                zone_to_row(zone), timeout=self._timeout
            )
        logger.info("Saved zone: id=%s", zone.id.value)
