"""
WordLog Backend — Health Check Route
=====================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Connects (if needed) and pings MongoDB, then reports status.
Who:   Called by Docker health checks, load balancers, and monitoring systems.

Status levels:
    - healthy:   MongoDB answered the ping
    - unhealthy: MongoDB unreachable or not configured

The endpoint itself always answers 200 so probes can read the body.
"""

import logging
import time

from fastapi import APIRouter, Request

from app import __version__
from app.exceptions import WordLogError
from app.schemas.word_observation import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    db_status = "disconnected"
    overall = "unhealthy"

    connection = getattr(request.app.state, "mongo", None)
    if connection is not None:
        try:
            await connection.ensure_connected()
            if await connection.ping():
                db_status = "connected"
                overall = "healthy"
        except WordLogError as e:
            logger.warning("Health check: database unavailable: %s", e.message)

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
