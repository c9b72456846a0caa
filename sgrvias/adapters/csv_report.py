"""CSV Report Renderer Adapter

One row per request with flattened fields, ready for spreadsheet import.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Mapping, Sequence

from sgrvias.domain.models import RepairRequest, User, ZoneMetadata
from sgrvias.domain.ports import RequestReportRenderer

logger = logging.getLogger(__name__)

COLUMNS: Sequence[str] = (
    "Protocolo",
    "SEI",
    "Contrato",
    "Status",
    "Zonal",
    "Data_Visita",
    "Endereco",
    "Latitude",
    "Longitude",
    "Descricao",
    "Responsavel",
)

_NO_TECHNICIAN = "N/A"


class CsvReportRenderer(RequestReportRenderer):
    """Spreadsheet export (UTF-8 with BOM so Excel keeps the accents)"""

    media_type = "text/csv"

    def render(
        self,
        requests: Sequence[RepairRequest],
        users: Sequence[User],
        zones: Sequence[ZoneMetadata],
        role_labels: Mapping[str, str],
    ) -> bytes:
        names = {u.id: u.name for u in users}
        zone_names = {z.id: z.name for z in zones}
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(list(COLUMNS))
        for request in requests:
            writer.writerow(
                [
                    request.protocol,
                    request.sei_number,
                    request.contract,
                    request.status.value,
                    zone_names.get(request.zonal, request.zonal.value),
                    request.visit_date,
                    request.location.address,
                    f"{request.location.latitude:.6f}",
                    f"{request.location.longitude:.6f}",
                    request.description,
                    names.get(request.technician_id, _NO_TECHNICIAN),
                ]
            )
        result = buffer.getvalue().encode("utf-8-sig")
        logger.info("Rendered CSV: rows=%d, bytes=%d", len(requests), len(result))
        return result
