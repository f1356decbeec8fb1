"""
Health check endpoints.
"""

from fastapi import APIRouter

from admedia.common.config import get_settings
from admedia.common.database import db
from admedia.schemas.response import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Service status and database health."""
    settings = get_settings()
    db_healthy = await db.health_check()

    return HealthResponse(
        status="healthy" if db_healthy else "degraded",
        version=settings.app_version,
        database=db_healthy,
    )


@router.get("/ping")
async def ping() -> dict:
    return {"pong": True}


@router.get("/ready")
async def readiness_check() -> dict:
    """Readiness check for Kubernetes."""
    if not await db.health_check():
        return {"ready": False, "reason": "Database not ready"}
    return {"ready": True}


@router.get("/live")
async def liveness_check() -> dict:
    """Liveness check for Kubernetes."""
    return {"alive": True}
