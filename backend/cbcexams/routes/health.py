"""
CBC Exams Backend: Health Check Route
=======================================

What:  Health check endpoint for monitoring and load balancer health checks.
How:   Runs SELECT 1 against the pool and reports the result-cache size.

Status levels:
    - healthy:   Database reachable
    - unhealthy: Database unreachable (the catalog cannot be served)
"""

import logging
import time

from fastapi import APIRouter, Request
from sqlalchemy import text

from cbcexams import __version__
from cbcexams.database import engine
from cbcexams.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    cache = getattr(request.app.state, "result_cache", None)

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        cache_entries=len(cache) if cache is not None else 0,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
