"""Zone API routes

GET /api/zones                 → 200 [Zone...]
PUT /api/zones/{id}            → 200 { id, ... }
GET /api/zones/{id}/stats      → 200 { manager_name, ... }
GET /api/zones/{id}/roster     → 200 [User...]
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from sgrvias.domain.models import Zone, ZoneMetadata
from sgrvias.entrypoints.api.deps import get_store
from sgrvias.entrypoints.api.routes.users import UserResponse
from sgrvias.entrypoints.api.routes.users import _to_response as _user_response
from sgrvias.services import views
from sgrvias.services.domain_store import DomainStore

router = APIRouter(prefix="/zones", tags=["zones"])


class ZoneRequest(BaseModel):
    name: str
    manager_id: str | None = None
    assistant_id: str | None = None
    description: str | None = None


class ZoneResponse(ZoneRequest):
    id: Zone


class ZoneStatsResponse(BaseModel):
    zone: Zone
    name: str
    manager_name: str
    assistant_name: str
    team_size: int
    request_count: int
    open_request_count: int


def _to_response(zone: ZoneMetadata) -> ZoneResponse:
    return ZoneResponse(
        id=zone.id,
        name=zone.name,
        manager_id=zone.manager_id,
        assistant_id=zone.assistant_id,
        description=zone.description,
    )


@router.get("", response_model=list[ZoneResponse])
async def list_zones(store: DomainStore = Depends(get_store)) -> list[ZoneResponse]:
    return [_to_response(z) for z in store.snapshot().zones]


@router.put("/{zone_id}", response_model=ZoneResponse)
async def update_zone(
    zone_id: Zone,
    body: ZoneRequest,
    store: DomainStore = Depends(get_store),
) -> ZoneResponse:
    """Rename a zone or change its manager/assistant/description"""
    zone = ZoneMetadata(id=zone_id, **body.model_dump())
    store.update_zonal(zone)
    return _to_response(zone)


@router.get("/{zone_id}/stats", response_model=ZoneStatsResponse)
async def zone_stats(
    zone_id: Zone,
    store: DomainStore = Depends(get_store),
) -> ZoneStatsResponse:
    snapshot = store.snapshot()
    stats = views.zone_stats(zone_id, snapshot.requests, snapshot.users, snapshot.zones)
    return ZoneStatsResponse(
        zone=stats.zone,
        name=stats.name,
        manager_name=stats.manager_name,
        assistant_name=stats.assistant_name,
        team_size=stats.team_size,
        request_count=stats.request_count,
        open_request_count=stats.open_request_count,
    )


@router.get("/{zone_id}/roster", response_model=list[UserResponse])
async def zone_roster(
    zone_id: Zone,
    store: DomainStore = Depends(get_store),
) -> list[UserResponse]:
    roster = views.zone_roster(store.snapshot().users, zone_id)
    return [_user_response(store, u) for u in roster]
