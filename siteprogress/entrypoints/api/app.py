"""FastAPI application

Read-only site progress API for the portal's site tables.
Runs as a Cloud Run service.

Endpoints:
  GET /health
  GET /api/sites/progress
  GET /api/sites/status
  GET /api/sites/last-activity
  GET /api/sites/sections
  GET /api/sites/summary
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.responses import Response

from siteprogress.entrypoints.api.routes import sites
from siteprogress.logging_config import setup_logging, site_log_context

# ── logging ─────────────────────────────────────────────────────────────────
setup_logging()
logger = logging.getLogger(__name__)

# ── FastAPI app ─────────────────────────────────────────────────────────────
app = FastAPI(
    title="Site Progress API",
    description="Per-division upload progress of telecom construction sites",
    version="1.0.0",
)

# ── global exception middleware ─────────────────────────────────────────────
# Registered before CORSMiddleware so it sits inside it: the 500 response
# passes through CORSMiddleware and gets the CORS headers.
#
# Stack: ServerErrorMiddleware → CORSMiddleware → this MW → ExceptionMiddleware → Routes


@app.middleware("http")
async def _catch_unhandled_exceptions(
    request: Request, call_next: Callable[[Request], Response]
) -> Response:
    with site_log_context(
        request.query_params.get("site_id"), request.query_params.get("site_name")
    ):
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


# ── CORS (portal frontend) ──────────────────────────────────────────────────
# CORS_ORIGINS: comma separated extra origins
_extra_origins = [
    o.strip() for o in os.environ.get("CORS_ORIGINS", "").split(",") if o.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_extra_origins if _extra_origins else ["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

# ── routers ─────────────────────────────────────────────────────────────────
_PREFIX = "/api"

app.include_router(sites.router, prefix=_PREFIX)


@app.get("/health")
async def health() -> dict:
    """Health check (Cloud Run startup probe)"""
    return {"status": "ok"}


logger.info("Site Progress API started")
