"""Storage schema mapping

Translates domain entities to and from the remote tabular schema
(underscore_case field names). Optional fields are always written with an
explicit None, never omitted, so a replace never leaves stale values behind.

Tables:
  repair_requests/{id}
  users/{id}
  zonals/{id}
"""

from __future__ import annotations

from typing import Any

from sgrvias.domain.errors import PersistenceError
from sgrvias.domain.models import (
    DEFAULT_ZONE_NAMES,
    Location,
    RepairRequest,
    RequestStatus,
    User,
    Zone,
    ZoneMetadata,
)

REQUESTS_TABLE = "repair_requests"
USERS_TABLE = "users"
ZONES_TABLE = "zonals"


def _none_if_blank(value: str | None) -> str | None:
    return value or None


def request_to_row(request: RepairRequest) -> dict[str, Any]:
    return {
        "id": request.id,
        "protocol": request.protocol,
        "sei_number": request.sei_number,
        "contract": request.contract,
        "description": request.description,
        "latitude": request.location.latitude,
        "longitude": request.location.longitude,
        "address": request.location.address,
        "visit_date": request.visit_date,
        "status": request.status.value,
        "technician_id": _none_if_blank(request.technician_id),
        "zonal": request.zonal.value,
        "photo_before": _none_if_blank(request.photo_before),
        "photo_after": _none_if_blank(request.photo_after),
        "created_at": request.created_at,
    }


def row_to_request(row: dict[str, Any]) -> RepairRequest:
    try:
        return RepairRequest(
            id=row["id"],
            protocol=row.get("protocol") or "",
            sei_number=row.get("sei_number") or "",
            contract=row.get("contract") or "",
            description=row.get("description") or "",
            location=Location(
                latitude=float(row.get("latitude") or 0.0),
                longitude=float(row.get("longitude") or 0.0),
                address=row.get("address") or "",
            ),
            visit_date=row.get("visit_date") or "",
            status=RequestStatus(row.get("status") or RequestStatus.OPEN.value),
            technician_id=row.get("technician_id") or "",
            zonal=Zone(row["zonal"]),
            created_at=row.get("created_at") or "",
            photo_before=row.get("photo_before"),
            photo_after=row.get("photo_after"),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise PersistenceError(
            f"Invalid {REQUESTS_TABLE} row {row.get('id')!r}: {e}"
        ) from e


def user_to_row(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "role": user.role,
        "zonal": user.zonal.value,
        "registration_number": _none_if_blank(user.registration_number),
        "email": _none_if_blank(user.email),
    }


def row_to_user(row: dict[str, Any]) -> User:
    try:
        return User(
            id=row["id"],
            name=row.get("name") or "",
            role=row["role"],
            zonal=Zone(row["zonal"]),
            registration_number=row.get("registration_number"),
            email=row.get("email"),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise PersistenceError(f"Invalid {USERS_TABLE} row {row.get('id')!r}: {e}") from e


def zone_to_row(zone: ZoneMetadata) -> dict[str, Any]:
    return {
        "id": zone.id.value,
        "name": zone.name,
        "manager_id": _none_if_blank(zone.manager_id),
        "assistant_id": _none_if_blank(zone.assistant_id),
        "description": _none_if_blank(zone.description),
    }


def row_to_zone(row: dict[str, Any]) -> ZoneMetadata:
    try:
        zone_id = Zone(row["id"])
    except (KeyError, ValueError) as e:
        raise PersistenceError(f"Invalid {ZONES_TABLE} row {row.get('id')!r}: {e}") from e
    return ZoneMetadata(
        id=zone_id,
        name=row.get("name") or DEFAULT_ZONE_NAMES[zone_id],
        manager_id=row.get("manager_id"),
        assistant_id=row.get("assistant_id"),
        description=row.get("description"),
    )
