"""
Naviga8 Backend - Health Check Route
======================================

What:  Health check endpoint for monitoring and container probes.
How:   Pings the store with SELECT 1 and reports uptime.
Who:   Called by Docker health checks, load balancers, and monitoring systems.

Status levels:
    - OK:        Store reachable
    - DEGRADED:  Store unreachable (still HTTP 200, the process itself is up)
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from app import __version__
from app.schemas.route import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Track when the service started for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description=(
        "Returns the status of the backend service and its store. "
        "Used by container health checks and load balancers."
    ),
)
async def health_check(request: Request) -> HealthResponse:
    database = request.app.state.database
    connected = await database.ping()

    return HealthResponse(
        status="OK" if connected else "DEGRADED",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
