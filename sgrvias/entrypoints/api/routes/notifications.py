"""Toast API routes

GET    /api/notifications        → 200 [{ id, message, severity }]
DELETE /api/notifications/{id}   → 204
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from sgrvias.domain.models import Severity
from sgrvias.entrypoints.api.deps import get_store
from sgrvias.services.domain_store import DomainStore

router = APIRouter(prefix="/notifications", tags=["notifications"])


class ToastResponse(BaseModel):
    id: str
    message: str
    severity: Severity


@router.get("", response_model=list[ToastResponse])
async def list_notifications(
    store: DomainStore = Depends(get_store),
) -> list[ToastResponse]:
    """Unexpired toasts, oldest first"""
    return [
        ToastResponse(id=t.id, message=t.message, severity=t.severity)
        for t in store.notifications.active()
    ]


@router.delete("/{toast_id}", status_code=status.HTTP_204_NO_CONTENT)
async def dismiss_notification(
    toast_id: str,
    store: DomainStore = Depends(get_store),
) -> None:
    if not store.notifications.dismiss(toast_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found"
        )
