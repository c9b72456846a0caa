"""PDF Report Renderer Adapter

RequestReportRenderer implementation using reportlab.
Each request starts on a new page with the header fields, description,
location, responsible technician and the before/after photos (when stored
as base64 data URLs). Long content continues on the following pages.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
from collections.abc import Mapping, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from sgrvias.domain.errors import ExportError
from sgrvias.domain.models import UNRESOLVED, RepairRequest, User, ZoneMetadata
from sgrvias.domain.ports import RequestReportRenderer

logger = logging.getLogger(__name__)

_TITLE = "Relatório de Visita Técnica - SGR-Vias"
_MARGIN = 56
_COLUMN_OFFSET = 280
_PHOTO_WIDTH = 220
_PHOTO_HEIGHT = 165
_FONT = "Helvetica"
_FONT_BOLD = "Helvetica-Bold"
_LINE_HEIGHT = 13


def _top() -> float:
    return A4[1] - _MARGIN


def _ensure_space(pdf: canvas.Canvas, y: float, needed: float) -> float:
    """Start a new page when the next `needed` points would cross the bottom margin"""
    if y - needed >= _MARGIN:
        return y
    pdf.showPage()
    pdf.setFont(_FONT, 10)
    return _top()


def decode_data_url(value: str | None) -> bytes | None:
    """
    Decode a "data:image/...;base64,..." string.

    Returns None for empty values and for plain URLs (not embedded).
    """
    if not value or not value.startswith("data:"):
        return None
    _, _, payload = value.partition(",")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        logger.warning("Invalid base64 photo payload (%d chars)", len(payload))
        return None


class PdfReportRenderer(RequestReportRenderer):
    """Paginated inspection report"""

    media_type = "application/pdf"

    def render(
        self,
        requests: Sequence[RepairRequest],
        users: Sequence[User],
        zones: Sequence[ZoneMetadata],
        role_labels: Mapping[str, str],
    ) -> bytes:
        if not requests:
            raise ExportError("Nenhuma solicitação para exportar.")

        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4)
        pdf.setTitle(_TITLE)
        users_by_id = {u.id: u for u in users}

        for request in requests:
            self._draw_request(pdf, request, users_by_id, zones, role_labels)
            pdf.showPage()

        pdf.save()
        result = buffer.getvalue()
        logger.info("Rendered PDF: requests=%d, bytes=%d", len(requests), len(result))
        return result

    def _draw_request(
        self,
        pdf: canvas.Canvas,
        request: RepairRequest,
        users_by_id: Mapping[str, User],
        zones: Sequence[ZoneMetadata],
        role_labels: Mapping[str, str],
    ) -> None:
        width = A4[0] - 2 * _MARGIN
        y = _top()
        zone_names = {z.id: z.name for z in zones}

        pdf.setFont(_FONT_BOLD, 16)
        pdf.drawString(_MARGIN, y, _TITLE)
        y -= 30

        pdf.setFont(_FONT, 10)
        for left, right in (
            (f"Protocolo: {request.protocol}", f"SEI: {request.sei_number}"),
            (
                f"Zonal: {zone_names.get(request.zonal, request.zonal.value)}",
                f"Status: {request.status.value}",
            ),
            (f"Contrato: {request.contract}", f"Data: {request.visit_date}"),
        ):
            pdf.drawString(_MARGIN, y, left)
            pdf.drawString(_MARGIN + _COLUMN_OFFSET, y, right)
            y -= 16
        y -= 10

        y = self._section(pdf, y, "Descrição da Ocorrência:")
        for line in simpleSplit(request.description, _FONT, 10, width):
            y = _ensure_space(pdf, y, _LINE_HEIGHT)
            pdf.drawString(_MARGIN, y, line)
            y -= _LINE_HEIGHT
        y -= 10

        y = self._section(pdf, y, "Localização:")
        for line in simpleSplit(f"Endereço: {request.location.address}", _FONT, 10, width):
            y = _ensure_space(pdf, y, _LINE_HEIGHT)
            pdf.drawString(_MARGIN, y, line)
            y -= _LINE_HEIGHT
        y = _ensure_space(pdf, y, 24 + _LINE_HEIGHT)
        pdf.drawString(
            _MARGIN,
            y,
            f"Coordenadas: {request.location.latitude}, {request.location.longitude}",
        )
        y -= 24

        technician = users_by_id.get(request.technician_id)
        if technician is None:
            responsible = UNRESOLVED
        else:
            role = role_labels.get(technician.role, technician.role)
            responsible = f"{technician.name} ({role})"
        pdf.drawString(_MARGIN, y, f"Responsável: {responsible}")
        y -= 30

        # section title, captions and the photo row stay on one page
        y = _ensure_space(pdf, y, 32 + _PHOTO_HEIGHT + 6)
        y = self._section(pdf, y, "Registro Fotográfico:")
        photo_y = y - _PHOTO_HEIGHT
        for offset, caption, photo in (
            (0, "Antes", request.photo_before),
            (_COLUMN_OFFSET, "Depois", request.photo_after),
        ):
            pdf.setFont(_FONT, 9)
            pdf.drawString(_MARGIN + offset, y, caption)
            self._draw_photo(pdf, photo, _MARGIN + offset, photo_y - 6)

    @staticmethod
    def _section(pdf: canvas.Canvas, y: float, title: str) -> float:
        y = _ensure_space(pdf, y, 16 + _LINE_HEIGHT)
        pdf.setFont(_FONT_BOLD, 12)
        pdf.drawString(_MARGIN, y, title)
        pdf.setFont(_FONT, 10)
        return y - 16

    @staticmethod
    def _draw_photo(pdf: canvas.Canvas, photo: str | None, x: float, y: float) -> None:
        raw = decode_data_url(photo)
        if raw is None:
            pdf.drawString(x, y + _PHOTO_HEIGHT / 2, "Sem foto registrada")
            return
        try:
            image = ImageReader(io.BytesIO(raw))
            pdf.drawImage(
                image,
                x,
                y,
                width=_PHOTO_WIDTH,
                height=_PHOTO_HEIGHT,
                preserveAspectRatio=True,
                anchor="sw",
            )
        except (OSError, ValueError) as e:
            logger.warning("Could not embed photo: %s", e)
            pdf.drawString(x, y + _PHOTO_HEIGHT / 2, "Foto indisponível")
