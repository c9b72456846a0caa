"""Repair request API routes

GET    /api/requests?search=&status=&zone=   → 200 [Request...]
POST   /api/requests                        → 201 { id, ... }
GET    /api/requests/{id}                   → 200 { id, ... }
PUT    /api/requests/{id}                   → 200 { id, ... }
DELETE /api/requests/{id}                   → 204
PATCH  /api/requests/{id}/status            → 200 { id, ... }
PATCH  /api/requests/{id}/address           → 200 { id, ... }
POST   /api/requests/{id}/after-photo       → 200 { id, ... }
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from sgrvias.domain.models import Location, RepairRequest, RequestStatus, Zone
from sgrvias.entrypoints.api.deps import get_store
from sgrvias.services import views
from sgrvias.services.domain_store import DomainStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/requests", tags=["requests"])


class LocationModel(BaseModel):
    latitude: float
    longitude: float
    address: str = ""


class RequestCreate(BaseModel):
    protocol: str = ""
    sei_number: str
    contract: str
    description: str
    location: LocationModel | None = None
    visit_date: str
    technician_id: str
    zonal: Zone
    photo_before: str | None = None


class RequestUpdate(BaseModel):
    protocol: str
    sei_number: str
    contract: str
    description: str
    location: LocationModel
    visit_date: str
    status: RequestStatus
    technician_id: str
    zonal: Zone
    photo_before: str | None = None
    photo_after: str | None = None


class RequestResponse(RequestUpdate):
    id: str
    created_at: str


class StatusChange(BaseModel):
    status: RequestStatus


class AddressChange(BaseModel):
    address: str


class AfterPhoto(BaseModel):
    photo: str


def _to_response(request: RepairRequest) -> RequestResponse:
    return RequestResponse(
        id=request.id,
        protocol=request.protocol,
        sei_number=request.sei_number,
        contract=request.contract,
        description=request.description,
        location=LocationModel(
            latitude=request.location.latitude,
            longitude=request.location.longitude,
            address=request.location.address,
        ),
        visit_date=request.visit_date,
        status=request.status,
        technician_id=request.technician_id,
        zonal=request.zonal,
        photo_before=request.photo_before,
        photo_after=request.photo_after,
        created_at=request.created_at,
    )


def _get_or_404(store: DomainStore, request_id: str) -> RepairRequest:
    request = store.get_request(request_id)
    if request is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Request not found"
        )
    return request


@router.get("", response_model=list[RequestResponse])
async def list_requests(
    search: str = "",
    status: RequestStatus | None = None,
    zone: Zone | None = None,
    store: DomainStore = Depends(get_store),
) -> list[RequestResponse]:
    """
    Request list, most recent first.

    Query parameters:
        search: text matched against protocol, address and description
        status / zone: optional filters (omitted = all)
    """
    requests = views.filter_requests(
        store.snapshot().requests, search=search, status=status, zone=zone
    )
    return [_to_response(r) for r in requests]


@router.post("", status_code=status.HTTP_201_CREATED, response_model=RequestResponse)
async def create_request(
    body: RequestCreate,
    store: DomainStore = Depends(get_store),
) -> RequestResponse:
    """Register a field inspection (always starts as OPEN)"""
    request = store.submit_request(
        protocol=body.protocol,
        sei_number=body.sei_number,
        contract=body.contract,
        description=body.description,
        location=Location(**body.location.model_dump()) if body.location else None,
        visit_date=body.visit_date,
        technician_id=body.technician_id,
        zonal=body.zonal,
        photo_before=body.photo_before,
    )
    logger.info("Request created: id=%s", request.id)
    return _to_response(request)


@router.get("/{request_id}", response_model=RequestResponse)
async def get_request(
    request_id: str,
    store: DomainStore = Depends(get_store),
) -> RequestResponse:
    return _to_response(_get_or_404(store, request_id))


@router.put("/{request_id}", response_model=RequestResponse)
async def update_request(
    request_id: str,
    body: RequestUpdate,
    store: DomainStore = Depends(get_store),
) -> RequestResponse:
    """Replace every field of a request"""
    current = _get_or_404(store, request_id)
    updated = RepairRequest(
        id=current.id,
        protocol=body.protocol,
        sei_number=body.sei_number,
        contract=body.contract,
        description=body.description,
        location=Location(**body.location.model_dump()),
        visit_date=body.visit_date,
        status=body.status,
        technician_id=body.technician_id,
        zonal=body.zonal,
        created_at=current.created_at,
        photo_before=body.photo_before,
        photo_after=body.photo_after,
    )
    store.update_request(updated)
    return _to_response(updated)


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_request(
    request_id: str,
    store: DomainStore = Depends(get_store),
) -> None:
    store.delete_request(request_id)
    logger.info("Request deleted: id=%s", request_id)


@router.patch("/{request_id}/status", response_model=RequestResponse)
async def change_status(
    request_id: str,
    body: StatusChange,
    store: DomainStore = Depends(get_store),
) -> RequestResponse:
    _get_or_404(store, request_id)
    return _to_response(store.change_status(request_id, body.status))


@router.patch("/{request_id}/address", response_model=RequestResponse)
async def update_address(
    request_id: str,
    body: AddressChange,
    store: DomainStore = Depends(get_store),
) -> RequestResponse:
    _get_or_404(store, request_id)
    return _to_response(store.update_address(request_id, body.address))


@router.post("/{request_id}/after-photo", response_model=RequestResponse)
async def attach_after_photo(
    request_id: str,
    body: AfterPhoto,
    store: DomainStore = Depends(get_store),
) -> RequestResponse:
    """Upload the "after" photo; the request becomes COMPLETED"""
    _get_or_404(store, request_id)
    return _to_response(store.attach_after_photo(request_id, body.photo))
