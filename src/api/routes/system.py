"""
System endpoints - Health check
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_service_container
from api.schemas.system import HealthResponse
from services.service_container import ServiceContainer

SERVICE_NAME = "ascii-animation-server"
API_VERSION = "1.0.0"

router = APIRouter(prefix="/api", tags=["System"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if API is running and responding"
)
async def health_check(
    services: ServiceContainer = Depends(get_service_container)
) -> HealthResponse:
    """Simple health check endpoint for monitoring"""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        version=API_VERSION,
        active_streams=services.scheduler.active_count,
        cached_animations=len(services.animation_store),
    )
