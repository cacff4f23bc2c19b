"""
DevFlow Backend — Health Check Route
======================================

What:  GET /health for load balancers and container probes.
How:   `store.ping()` runs SELECT 1. The database is the only dependency;
       when it is unreachable the service reports "unhealthy" with 503 so
       traffic is routed elsewhere.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from devflow import __version__
from devflow.database import store
from devflow.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check():
    db_status = "connected"
    overall = "healthy"
    try:
        await store.ping()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", e)

    body = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime=round(time.time() - _start_time, 2),
        timestamp=datetime.now(timezone.utc),
    )
    return JSONResponse(
        status_code=200 if overall == "healthy" else 503,
        content=body.model_dump(mode="json"),
    )
