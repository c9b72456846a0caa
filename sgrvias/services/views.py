"""Derived views - pure projections over a StoreSnapshot

Nothing here mutates or caches; the same snapshot always yields the same
output. Dangling references resolve to the UNRESOLVED placeholder.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sgrvias.domain.models import (
    UNRESOLVED,
    RepairRequest,
    RequestStatus,
    User,
    Zone,
    ZoneMetadata,
)


@dataclass(frozen=True)
class StatusCounts:
    total: int
    by_status: dict[RequestStatus, int]


@dataclass(frozen=True)
class ZoneCount:
    zone: Zone
    name: str
    total: int


@dataclass(frozen=True)
class ZoneStats:
    """Statistics bundle shown on the organization page"""

    zone: Zone
    name: str
    manager_name: str
    assistant_name: str
    team_size: int
    request_count: int
    open_request_count: int


def zone_name(zones: Iterable[ZoneMetadata], zone_id: Zone | str) -> str:
    raw = zone_id.value if isinstance(zone_id, Zone) else str(zone_id)
    for zone in zones:
        if zone.id.value == raw:
            return zone.name
    return raw


def user_name(users: Iterable[User], user_id: str | None) -> str:
    """Name of the referenced user, or UNRESOLVED"""
    if not user_id:
        return UNRESOLVED
    for user in users:
        if user.id == user_id:
            return user.name
    return UNRESOLVED


def status_counts(requests: Sequence[RepairRequest]) -> StatusCounts:
    by_status = {status: 0 for status in RequestStatus}
    for request in requests:
        by_status[request.status] += 1
    return StatusCounts(total=len(requests), by_status=by_status)


def zone_counts(
    requests: Sequence[RepairRequest], zones: Sequence[ZoneMetadata]
) -> list[ZoneCount]:
    """Requests per zone, in Zone order, labelled with resolved display names"""
    totals = {zone: 0 for zone in Zone}
    for request in requests:
        totals[request.zonal] += 1
    return [
        ZoneCount(zone=zone, name=zone_name(zones, zone), total=total)
        for zone, total in totals.items()
    ]


def zone_roster(users: Sequence[User], zone: Zone) -> list[User]:
    return [u for u in users if u.zonal == zone]


def zone_stats(
    zone: Zone,
    requests: Sequence[RepairRequest],
    users: Sequence[User],
    zones: Sequence[ZoneMetadata],
) -> ZoneStats:
    metadata = next((z for z in zones if z.id == zone), None)
    zone_requests = [r for r in requests if r.zonal == zone]
    return ZoneStats(
        zone=zone,
        name=metadata.name if metadata else zone.value,
        manager_name=user_name(users, metadata.manager_id if metadata else None),
        assistant_name=user_name(users, metadata.assistant_id if metadata else None),
        team_size=len(zone_roster(users, zone)),
        request_count=len(zone_requests),
        open_request_count=sum(1 for r in zone_requests if r.status is RequestStatus.OPEN),
    )


def filter_requests(
    requests: Sequence[RepairRequest],
    search: str = "",
    status: RequestStatus | None = None,
    zone: Zone | None = None,
) -> list[RepairRequest]:
    """
    List-page filter.

    `search` is matched case-insensitively against protocol, address and
    description; `status` / `zone` of None mean "all".
    """
    term = (search or "").strip().lower()
    result = []
    for request in requests:
        if status is not None and request.status != status:
            continue
        if zone is not None and request.zonal != zone:
            continue
        if term and not (
            term in request.protocol.lower()
            or term in request.location.address.lower()
            or term in request.description.lower()
        ):
            continue
        result.append(request)
    return result
