"""Health Route - reports database state without ever failing itself.

Invariants:
    - GET /api/health always returns 200 with status "ok" while the process is up
    - database is sampled from the readiness flag on every call (no IO, no cache)
    - timestamp is generated per request
"""

from fastapi import APIRouter, Depends, status

from survey_gateway.api.dependencies import get_app_settings
from survey_gateway.config import Settings
from survey_gateway.infrastructure.database import DatabaseConnectivity, get_connectivity
from survey_gateway.schemas.status import HealthStatus, iso_now

router = APIRouter(tags=["health"])


@router.get(
    "/api/health", response_model=HealthStatus, status_code=status.HTTP_200_OK,
)
async def health_check(
    connectivity: DatabaseConnectivity = Depends(get_connectivity),
    settings: Settings = Depends(get_app_settings),
):
    return HealthStatus(
        database=connectivity.is_ready(),
        version=settings.api_version,
        timestamp=iso_now(),
    )
