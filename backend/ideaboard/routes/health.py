"""
IdeaBoard Backend — Health Check Route
========================================

What:  Health check endpoint for monitoring and container probes.
How:   Checks that the data directory is writable and reads the collection.

Status levels:
    - healthy:   data directory writable (HTTP 200)
    - unhealthy: data directory missing or read-only (HTTP 503)
"""

import logging
import os
import time

from fastapi import APIRouter, Depends, Response

from ideaboard import __version__
from ideaboard.schemas.idea import HealthResponse
from ideaboard.store import IdeaStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Process start, for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Reports whether the data directory is writable and how many ideas are stored.",
)
async def health_check(
    response: Response,
    store: IdeaStore = Depends(get_store),
) -> HealthResponse:
    storage_status = "writable"
    overall = "healthy"

    if not (store.data_dir.is_dir() and os.access(store.data_dir, os.W_OK)):
        storage_status = "unwritable"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: data directory %s is not writable", store.data_dir)

    ideas = await store.load_all()

    return HealthResponse(
        status=overall,
        version=__version__,
        storage=storage_status,
        idea_count=len(ideas),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
