"""
Commute Match Backend — Health Check Route
===========================================

What:  Liveness/readiness probe for load balancers and Docker.
How:   Runs `SELECT 1` through the session factory.

    healthy:    database reachable (HTTP 200)
    unhealthy:  database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from commute_api import __version__
from commute_api.dependencies import get_session_factory
from commute_api.schemas.common import ApiResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=ApiResponse[HealthResponse],
    summary="Service health check",
)
async def health_check(
    factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    db_status = "connected"
    try:
        async with factory() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        db_status = "disconnected"
        logger.warning("Health check: database unreachable: %s", str(e))

    healthy = db_status == "connected"
    body = ApiResponse(
        success=healthy,
        result=HealthResponse(
            status="healthy" if healthy else "unhealthy",
            version=__version__,
            database=db_status,
            uptime_seconds=round(time.time() - _start_time, 2),
        ),
        message="Service is healthy" if healthy else "Database unreachable",
    )
    return JSONResponse(status_code=200 if healthy else 503, content=body.model_dump(mode="json"))
