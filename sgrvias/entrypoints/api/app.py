"""FastAPI application

SGR-Vias backend API. All state lives in the process-wide DomainStore
provided by deps.get_store().

Endpoints:
  GET    /api/requests
  POST   /api/requests
  GET    /api/requests/{id}
  PUT    /api/requests/{id}
  DELETE /api/requests/{id}
  PATCH  /api/requests/{id}/status
  PATCH  /api/requests/{id}/address
  POST   /api/requests/{id}/after-photo
  GET    /api/users
  POST   /api/users
  PUT    /api/users/{id}
  DELETE /api/users/{id}
  GET    /api/zones
  PUT    /api/zones/{id}
  GET    /api/zones/{id}/stats
  GET    /api/zones/{id}/roster
  GET    /api/roles
  POST   /api/roles
  DELETE /api/roles/{key}
  GET    /api/notifications
  DELETE /api/notifications/{id}
  GET    /api/dashboard
  GET    /api/reports/requests.csv
  GET    /api/reports/requests.pdf
  GET    /api/reports/requests/{id}.pdf
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.responses import Response

from sgrvias.domain.errors import ExportError, PersistenceError, ValidationError
from sgrvias.entrypoints.api.routes import (
    dashboard,
    notifications,
    reports,
    requests,
    roles,
    users,
    zones,
)
from sgrvias.logging_config import setup_logging

# ── Logging ─────────────────────────────────────────────────────────────────
setup_logging()
logger = logging.getLogger(__name__)

# ── FastAPI app ─────────────────────────────────────────────────────────────
app = FastAPI(
    title="SGR-Vias API",
    description="Field inspection tracker for municipal road and sidewalk repairs",
    version="1.0.0",
)


# ── Domain error mapping ────────────────────────────────────────────────────
# The store has already queued the error toast; these only pick the status.


@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(ExportError)
async def _export_error(request: Request, exc: ExportError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(PersistenceError)
async def _persistence_error(request: Request, exc: PersistenceError) -> JSONResponse:
    return JSONResponse(status_code=502, content={"detail": str(exc)})


# ── Global exception middleware ─────────────────────────────────────────────
# Registered before CORSMiddleware so it sits inside it: 500 responses still
# pass through CORSMiddleware and get CORS headers.
#
# Stack: ServerErrorMiddleware → CORSMiddleware → this MW → ExceptionMiddleware → Routes


@app.middleware("http")
async def _catch_unhandled_exceptions(
    request: Request, call_next: Callable[[Request], Response]
) -> Response:
    try:
        return await call_next(request)
    except Exception as exc:
        logger.error(
            "Unhandled exception: %s %s - %s",
            request.method,
            request.url.path,
            exc,
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


# ── CORS (browser front end) ────────────────────────────────────────────────
# CORS_ORIGINS: comma-separated extra origins
_extra_origins = [
    o.strip() for o in os.environ.get("CORS_ORIGINS", "").split(",") if o.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_extra_origins if _extra_origins else ["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

# ── Routers ─────────────────────────────────────────────────────────────────
_PREFIX = "/api"

app.include_router(requests.router, prefix=_PREFIX)
app.include_router(users.router, prefix=_PREFIX)
app.include_router(zones.router, prefix=_PREFIX)
app.include_router(roles.router, prefix=_PREFIX)
app.include_router(notifications.router, prefix=_PREFIX)
app.include_router(dashboard.router, prefix=_PREFIX)
app.include_router(reports.router, prefix=_PREFIX)


@app.get("/health")
async def health() -> dict:
    """Health check"""
    return {"status": "ok"}


logger.info("SGR-Vias API started")
