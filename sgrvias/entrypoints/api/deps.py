"""FastAPI dependency injection

Owns the process-wide DomainStore. Routes receive it through
Depends(get_store); tests swap it with app.dependency_overrides.
"""

from __future__ import annotations

import logging
import threading

from sgrvias.adapters.csv_report import CsvReportRenderer
from sgrvias.adapters.pdf_report import PdfReportRenderer
from sgrvias.entrypoints.factory import create_store
from sgrvias.services.domain_store import DomainStore

logger = logging.getLogger(__name__)

# ── DomainStore (singleton) ─────────────────────────────────────────────────

_store: DomainStore | None = None
_store_lock = threading.Lock()


def get_store() -> DomainStore:
    """DomainStore dependency, created and loaded on first use"""
    global _store
    with _store_lock:
        if _store is None:
            _store = create_store()
            logger.info("DomainStore initialized")
    return _store


# ── Report renderers ────────────────────────────────────────────────────────


def get_csv_renderer() -> CsvReportRenderer:
    return CsvReportRenderer()


def get_pdf_renderer() -> PdfReportRenderer:
    return PdfReportRenderer()
