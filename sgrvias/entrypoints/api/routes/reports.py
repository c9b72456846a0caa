"""Report export API routes

GET /api/reports/requests.csv?search=&status=&zone=   → 200 text/csv
GET /api/reports/requests.pdf?search=&status=&zone=   → 200 application/pdf
GET /api/reports/requests/{id}.pdf                    → 200 application/pdf
"""

from __future__ import annotations

import datetime
import re
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.responses import Response

from sgrvias.adapters.csv_report import CsvReportRenderer
from sgrvias.adapters.pdf_report import PdfReportRenderer
from sgrvias.domain.models import RepairRequest, RequestStatus, Zone
from sgrvias.domain.ports import RequestReportRenderer
from sgrvias.entrypoints.api.deps import get_csv_renderer, get_pdf_renderer, get_store
from sgrvias.services import views
from sgrvias.services.domain_store import DomainStore

router = APIRouter(prefix="/reports", tags=["reports"])


def _content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback name and the UTF-8 name (RFC 6266)"""
    fallback = re.sub(r"[^A-Za-z0-9._-]", "_", filename)
    return (
        f'attachment; filename="{fallback}"; '
        f"filename*=UTF-8''{quote(filename, safe='')}"
    )


def _render(
    store: DomainStore,
    renderer: RequestReportRenderer,
    requests: list[RepairRequest],
    filename: str,
) -> Response:
    snapshot = store.snapshot()
    content = renderer.render(
        requests, snapshot.users, snapshot.zones, snapshot.role_labels
    )
    return Response(
        content=content,
        media_type=renderer.media_type,
        headers={"Content-Disposition": _content_disposition(filename)},
    )


def _today() -> str:
    return datetime.date.today().isoformat()


@router.get("/requests.csv")
async def export_csv(
    search: str = "",
    status: RequestStatus | None = None,
    zone: Zone | None = None,
    store: DomainStore = Depends(get_store),
    renderer: CsvReportRenderer = Depends(get_csv_renderer),
) -> Response:
    requests = views.filter_requests(
        store.snapshot().requests, search=search, status=status, zone=zone
    )
    return _render(store, renderer, requests, f"Relatorio_Reparos_{_today()}.csv")


@router.get("/requests.pdf")
async def export_pdf(
    search: str = "",
    status: RequestStatus | None = None,
    zone: Zone | None = None,
    store: DomainStore = Depends(get_store),
    renderer: PdfReportRenderer = Depends(get_pdf_renderer),
) -> Response:
    requests = views.filter_requests(
        store.snapshot().requests, search=search, status=status, zone=zone
    )
    return _render(store, renderer, requests, f"Relatorio_Reparos_{_today()}.pdf")


@router.get("/requests/{request_id}.pdf")
async def export_request_pdf(
    request_id: str,
    store: DomainStore = Depends(get_store),
    renderer: PdfReportRenderer = Depends(get_pdf_renderer),
) -> Response:
    request = store.get_request(request_id)
    if request is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Request not found"
        )
    return _render(store, renderer, [request], f"Relatorio_{request.protocol}.pdf")
