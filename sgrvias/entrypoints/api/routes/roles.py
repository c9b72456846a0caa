"""Role-label API routes

GET    /api/roles          → 200 [{ key, label, builtin }]
POST   /api/roles          → 201 { key, label, builtin }
DELETE /api/roles/{key}    → 204
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from sgrvias.domain.models import BUILTIN_ROLE_LABELS
from sgrvias.entrypoints.api.deps import get_store
from sgrvias.services.domain_store import DomainStore

router = APIRouter(prefix="/roles", tags=["roles"])


class RoleRequest(BaseModel):
    label: str


class RoleResponse(BaseModel):
    key: str
    label: str
    builtin: bool


@router.get("", response_model=list[RoleResponse])
async def list_roles(store: DomainStore = Depends(get_store)) -> list[RoleResponse]:
    return [
        RoleResponse(key=key, label=label, builtin=key in BUILTIN_ROLE_LABELS)
        for key, label in store.role_labels.items()
    ]


@router.post("", status_code=status.HTTP_201_CREATED, response_model=RoleResponse)
async def add_role(
    body: RoleRequest,
    store: DomainStore = Depends(get_store),
) -> RoleResponse:
    key = store.add_role(body.label)
    return RoleResponse(key=key, label=store.get_role_label(key), builtin=False)


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_role(
    key: str,
    store: DomainStore = Depends(get_store),
) -> None:
    store.remove_role(key)
