"""Dashboard API route

GET /api/dashboard?zone=   → 200 { total, by_status, by_zone }
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from sgrvias.domain.models import Zone
from sgrvias.entrypoints.api.deps import get_store
from sgrvias.services import views
from sgrvias.services.domain_store import DomainStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


class ZoneCountResponse(BaseModel):
    zone: Zone
    name: str
    total: int


class DashboardResponse(BaseModel):
    total: int
    by_status: dict[str, int]  # key: stored status label ("Aberta", ...)
    by_zone: list[ZoneCountResponse]


@router.get("", response_model=DashboardResponse)
async def dashboard(
    zone: Zone | None = None,
    store: DomainStore = Depends(get_store),
) -> DashboardResponse:
    snapshot = store.snapshot()
    requests = views.filter_requests(snapshot.requests, zone=zone)
    counts = views.status_counts(requests)
    return DashboardResponse(
        total=counts.total,
        by_status={s.value: n for s, n in counts.by_status.items()},
        by_zone=[
            ZoneCountResponse(zone=row.zone, name=row.name, total=row.total)
            for row in views.zone_counts(requests, snapshot.zones)
        ],
    )
