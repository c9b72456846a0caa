"""Personnel API routes

GET    /api/users          → 200 [User...]
POST   /api/users          → 201 { id, ... }
PUT    /api/users/{id}     → 200 { id, ... }
DELETE /api/users/{id}     → 204
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from sgrvias.domain.models import User, Zone, new_user_id
from sgrvias.entrypoints.api.deps import get_store
from sgrvias.services.domain_store import DomainStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


class UserRequest(BaseModel):
    name: str
    role: str
    zonal: Zone
    registration_number: str | None = None
    email: str | None = None


class UserResponse(UserRequest):
    id: str
    role_label: str


def _to_response(store: DomainStore, user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        role=user.role,
        role_label=store.get_role_label(user.role),
        zonal=user.zonal,
        registration_number=user.registration_number,
        email=user.email,
    )


@router.get("", response_model=list[UserResponse])
async def list_users(
    zone: Zone | None = None,
    store: DomainStore = Depends(get_store),
) -> list[UserResponse]:
    users = store.snapshot().users
    return [_to_response(store, u) for u in users if zone is None or u.zonal == zone]


@router.post("", status_code=status.HTTP_201_CREATED, response_model=UserResponse)
async def create_user(
    body: UserRequest,
    store: DomainStore = Depends(get_store),
) -> UserResponse:
    user = User(id=new_user_id(), **body.model_dump())
    store.add_user(user)
    logger.info("User created: id=%s", user.id)
    return _to_response(store, user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    body: UserRequest,
    store: DomainStore = Depends(get_store),
) -> UserResponse:
    if store.get_user(user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    user = User(id=user_id, **body.model_dump())
    store.update_user(user)
    return _to_response(store, user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    store: DomainStore = Depends(get_store),
) -> None:
    store.delete_user(user_id)
    logger.info("User deleted: id=%s", user_id)
