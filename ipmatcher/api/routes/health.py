"""Health check and metrics endpoints.

This module provides endpoints for:
- Basic liveness check (/healthz)
- Readiness check (/readyz)
- Prometheus text exposition (/metrics)
"""

from __future__ import annotations

import time

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from ipmatcher.core.metrics import render_prometheus_metrics

router = APIRouter()

# Application start time for uptime tracking
_start_time = time.time()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    """Basic liveness check.

    Returns 200 if the application is running.
    """
    return {"ok": "true"}


@router.get("/readyz")
async def readyz(request: Request) -> JSONResponse:
    """Readiness check.

    Returns 200 once the matcher is initialized (and seeded, if configured),
    503 otherwise.
    """
    matcher = getattr(request.app.state, "matcher", None)
    if matcher is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"ok": "false", "matcher": "down"},
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "ok": "true",
            "matcher": "ok",
            "networks": len(matcher.registry),
            "uptime_seconds": round(time.time() - _start_time, 2),
        },
    )


@router.get("/metrics", response_class=PlainTextResponse)
async def metrics(request: Request) -> PlainTextResponse:
    matcher = getattr(request.app.state, "matcher", None)
    if matcher is None:
        return PlainTextResponse("", status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return PlainTextResponse(
        render_prometheus_metrics(matcher),
        media_type="text/plain; version=0.0.4",
    )
