"""Domain models - plain data structures with no external dependencies"""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType

from sgrvias.domain.errors import ValidationError


class RequestStatus(str, Enum):
    """Lifecycle status of a repair request (values are the stored labels)"""

    OPEN = "Aberta"
    IN_PROGRESS = "Em andamento"
    COMPLETED = "Concluída"
    CANCELED = "Cancelada"


class Zone(str, Enum):
    """The four administrative service areas"""

    NORTH = "NORTH"
    SOUTH = "SOUTH"
    EAST = "EAST"
    WEST = "WEST"


class Severity(str, Enum):
    """Toast severity"""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


UNRESOLVED = "Não definido"

MANAGER_ROLE = "Manager"
COLLABORATOR_ROLE = "Collaborator"
INTERN_ROLE = "Intern"

BUILTIN_ROLE_LABELS = MappingProxyType(
    {
        MANAGER_ROLE: "Gestor",
        COLLABORATOR_ROLE: "Colaborador",
        INTERN_ROLE: "Estagiário",
    }
)

DEFAULT_ZONE_NAMES = MappingProxyType(
    {
        Zone.NORTH: "Zonal Norte",
        Zone.SOUTH: "Zonal Sul",
        Zone.EAST: "Zonal Leste",
        Zone.WEST: "Zonal Oeste",
    }
)


def _epoch_ms() -> int:
    return int(time.time() * 1000)


_stamp_lock = threading.Lock()
_last_stamp = 0


def _unique_epoch_ms() -> int:
    """Epoch milliseconds, strictly increasing within the process"""
    global _last_stamp
    with _stamp_lock:
        _last_stamp = max(_epoch_ms(), _last_stamp + 1)
        return _last_stamp


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Location:
    """GPS evidence captured by the field form"""

    latitude: float
    longitude: float
    address: str = ""


@dataclass(frozen=True)
class RepairRequest:
    """Field inspection record"""

    id: str  # e.g. "req_1715340000000"
    protocol: str  # e.g. "2024.123456"
    sei_number: str  # official process number, e.g. "00.123.456/2024"
    contract: str  # e.g. "CTR-05/2023"
    description: str
    location: Location
    visit_date: str  # YYYY-MM-DD
    status: RequestStatus
    technician_id: str  # User.id
    zonal: Zone
    created_at: str  # ISO8601
    photo_before: str | None = None  # data URL
    photo_after: str | None = None  # data URL

    @classmethod
    def new(
        cls,
        *,
        protocol: str,
        sei_number: str,
        contract: str,
        description: str,
        location: Location | None,
        visit_date: str,
        technician_id: str,
        zonal: Zone,
        photo_before: str | None,
    ) -> RepairRequest:
        """
        Build a request from a field submission.

        The request always starts as OPEN. A blank protocol gets a generated
        "PR-xxxxxx" code.

        Raises:
            ValidationError: coordinates or the "before" photo are missing
        """
        if location is None or not location.latitude or not photo_before:
            raise ValidationError(
                "Localização e Foto são obrigatórios para comprovação de campo."
            )
        now_ms = _unique_epoch_ms()
        return cls(
            id=f"req_{now_ms}",
            protocol=protocol or f"PR-{str(now_ms)[-6:]}",
            sei_number=sei_number,
            contract=contract,
            description=description,
            location=location,
            visit_date=visit_date,
            status=RequestStatus.OPEN,
            technician_id=technician_id,
            zonal=Zone(zonal),
            created_at=_utc_now_iso(),
            photo_before=photo_before,
        )


@dataclass(frozen=True)
class User:
    """Personnel record (technician, manager or intern)"""

    id: str
    name: str
    role: str  # built-in role key or a custom "role_<ms>" key
    zonal: Zone
    registration_number: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class ZoneMetadata:
    """Per-zone configuration"""

    id: Zone
    name: str
    manager_id: str | None = None
    assistant_id: str | None = None
    description: str | None = None

    @classmethod
    def default(cls, zone: Zone) -> ZoneMetadata:
        return cls(id=zone, name=DEFAULT_ZONE_NAMES[zone])


@dataclass(frozen=True)
class Toast:
    """Ephemeral user-facing message"""

    message: str
    severity: Severity
    expires_at: float  # monotonic clock seconds
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


def new_role_key(existing: set[str] | frozenset[str]) -> str:
    """Generate a time-based role key that is not in `existing`"""
    stamp = _unique_epoch_ms()
    while f"role_{stamp}" in existing:
        stamp += 1
    return f"role_{stamp}"


def new_user_id() -> str:
    return f"u_{_unique_epoch_ms()}"
