"""Health check endpoints for monitoring application status."""

import time

from fastapi import APIRouter, Depends, status

from shorturl.api.dependencies import get_health_check
from shorturl.core.config import settings
from shorturl.db.base import DatabaseHealthCheck

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Get system health status",
    response_description="Health status of all system components"
)
async def health_check(health: DatabaseHealthCheck = Depends(get_health_check)):
    """Check health of the database connection."""
    database = await health.check_connection()

    return {
        "status": "healthy" if database["status"] == "healthy" else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT.value,
        "timestamp": time.time(),
        "components": {"database": database},
    }


@router.get(
    "/health/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
    response_description="Application liveness status"
)
async def liveness_probe():
    """Simple check that application is running."""
    return {"alive": True}
