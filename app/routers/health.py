# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Checks for load balancers and orchestrators:
#   /health        process is up, with environment and API version
#   /health/ready  MongoDB answers a ping (503 otherwise)
#   /health/live   process is alive
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from app.config import settings
from app.dependencies import DatabaseDep

router = APIRouter()

API_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str | None = None
    version: str | None = None
    database: str | None = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
def health_check():
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
    )


@router.get("/health/ready", response_model=HealthResponse, response_model_exclude_none=True)
def readiness_check(database: DatabaseDep, response: Response):
    """
    Ready when MongoDB answers a ping.

    Returns 503 with status "degraded" while the database is unreachable.
    """
    if database.ping():
        return HealthResponse(status="ready", timestamp=_now(), database=database.name)

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(status="degraded", timestamp=_now(), database="unreachable")


@router.get("/health/live", response_model=HealthResponse, response_model_exclude_none=True)
async def liveness_check():
    return HealthResponse(status="alive", timestamp=_now())
