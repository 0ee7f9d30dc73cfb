"""
Measurebook Backend - Root and Health Check Routes
====================================================

What:  GET / liveness text and GET /health status report.
Who:   Called by Docker health checks, load balancers and humans poking the API.

Status levels:
    - healthy:   the project store accepts writes (HTTP 200)
    - degraded:  reads still work but writes would fail (HTTP 200, flag for monitoring)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from measurebook import __version__
from measurebook.routes.projects import get_project_store
from measurebook.schemas.project import HealthResponse
from measurebook.store import ProjectStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, summary="Liveness text")
async def root() -> str:
    return "API is running!"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(store: ProjectStore = Depends(get_project_store)) -> HealthResponse:
    """
    Report whether the project store can currently be written.

    Loads never fail (they degrade to an empty collection), so writability
    is the only thing worth probing.
    """
    store_status = "writable"
    overall = "healthy"

    try:
        if not await store.health_check():
            store_status = "read_only"
            overall = "degraded"
    except Exception as e:
        store_status = "read_only"
        overall = "degraded"
        logger.warning("Health check: store probe failed: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        store=store_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
