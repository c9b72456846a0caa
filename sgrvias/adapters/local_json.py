"""Local JSON storage adapters

File-backed stand-ins for browser storage, used when SGR_BACKEND=local.

- LocalJsonGateway: PersistenceGateway over a single JSON file holding the
  three tables ({"repair_requests": {id: row}, "users": ..., "zonals": ...}).
- LocalJsonRoleLabelStore: key-value JSON file; the role-label dictionary
  lives under the fixed key "sgr_role_labels".

Files are re-read on every call and replaced atomically on every write.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

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
from sgrvias.domain.ports import PersistenceGateway, RoleLabelStore

logger = logging.getLogger(__name__)

ROLE_LABELS_KEY = "sgr_role_labels"


def _read_json(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open(encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError) as e:
        raise PersistenceError(f"Falha ao ler {path.name}: {e}") from e
    if not isinstance(data, dict):
        raise PersistenceError(f"Conteúdo inválido em {path.name}")
    return data


def _write_json(path: Path, data: dict[str, Any]) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
    except OSError as e:
        raise PersistenceError(f"Falha ao gravar {path.name}: {e}") from e


class LocalJsonGateway(PersistenceGateway):
    """PersistenceGateway backed by a local JSON file"""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def _table(self, name: str) -> dict[str, dict[str, Any]]:
        return dict(_read_json(self._path).get(name) or {})

    def _save_table(self, name: str, rows: dict[str, dict[str, Any]]) -> None:
        data = _read_json(self._path)
        data[name] = rows
        _write_json(self._path, data)

    def _insert(self, table: str, row: dict[str, Any]) -> None:
        rows = self._table(table)
        if row["id"] in rows:
            raise PersistenceError(
                f"Registro duplicado em {table}: id={row['id']} já existe"
            )
        rows[row["id"]] = row
        self._save_table(table, rows)

    def _replace(self, table: str, row: dict[str, Any]) -> None:
        rows = self._table(table)
        if row["id"] not in rows:
            raise PersistenceError(f"Registro não encontrado em {table}: id={row['id']}")
        rows[row["id"]] = row
        self._save_table(table, rows)

    def _remove(self, table: str, row_id: str) -> None:
        rows = self._table(table)
        if rows.pop(row_id, None) is None:
            logger.debug("Delete of absent row ignored: table=%s, id=%s", table, row_id)
            return
        self._save_table(table, rows)

    # ── repair_requests ──────────────────────────────────────────────────────

    def list_requests(self) -> list[RepairRequest]:
        requests = [row_to_request(row) for row in self._table(REQUESTS_TABLE).values()]
        return sorted(requests, key=lambda r: r.created_at, reverse=True)

    def create_request(self, request: RepairRequest) -> None:
        self._insert(REQUESTS_TABLE, request_to_row(request))
        logger.info("Created request: id=%s", request.id)

    def update_request(self, request: RepairRequest) -> None:
        row = request_to_row(request)
        existing = self._table(REQUESTS_TABLE).get(request.id)
        if existing is not None:
            row["created_at"] = existing.get("created_at", row["created_at"])
        self._replace(REQUESTS_TABLE, row)
        logger.info("Updated request: id=%s, status=%s", request.id, request.status.value)

    def delete_request(self, request_id: str) -> None:
        self._remove(REQUESTS_TABLE, request_id)
        logger.info("Deleted request: id=%s", request_id)

    # ── users ────────────────────────────────────────────────────────────────

    def list_users(self) -> list[User]:
        return [row_to_user(row) for row in self._table(USERS_TABLE).values()]

    def create_user(self, user: User) -> None:
        self._insert(USERS_TABLE, user_to_row(user))
        logger.info("Created user: id=%s, role=%s", user.id, user.role)

    def update_user(self, user: User) -> None:
        self._replace(USERS_TABLE, user_to_row(user))
        logger.info("Updated user: id=%s", user.id)

    def delete_user(self, user_id: str) -> None:
        self._remove(USERS_TABLE, user_id)
        logger.info("Deleted user: id=%s", user_id)

    # ── zonals ───────────────────────────────────────────────────────────────

    def list_zones(self) -> list[ZoneMetadata]:
        return [row_to_zone(row) for row in self._table(ZONES_TABLE).values()]

    def upsert_zone(self, zone: ZoneMetadata) -> None:
        rows = self._table(ZONES_TABLE)
        row = zone_to_row(zone)
        rows[row["id"]] = row
        self._save_table(ZONES_TABLE, rows)
        logger.info("Saved zone: id=%s", zone.id.value)


class LocalJsonRoleLabelStore(RoleLabelStore):
    """RoleLabelStore backed by a local key-value JSON file"""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def load(self) -> dict[str, str]:
        labels = _read_json(self._path).get(ROLE_LABELS_KEY) or {}
        if not isinstance(labels, dict):
            raise PersistenceError(f"Conteúdo inválido em {self._path.name}")
        return {str(k): str(v) for k, v in labels.items()}

    def save(self, labels: Mapping[str, str]) -> None:
        data = _read_json(self._path)
        data[ROLE_LABELS_KEY] = dict(labels)
        _write_json(self._path, data)
        logger.info("Saved role labels: count=%d", len(labels))
