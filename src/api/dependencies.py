"""
API Dependencies - Service container access for FastAPI endpoints

Pattern:
1. main_asyncio.py (or a test) builds the ServiceContainer
2. create_app(services) calls set_service_container()
3. Endpoints use get_service_container() via Depends()

Example:
    @router.get("/list")
    async def list_animations(services: ServiceContainer = Depends(get_service_container)):
        return await services.listing.format(await services.asset_source.list_names())
"""

from typing import Optional
from fastapi import HTTPException, status
from services.service_container import ServiceContainer


# Global service container (set during app creation)
_service_container: Optional[ServiceContainer] = None


def set_service_container(services: Optional[ServiceContainer]) -> None:
    """
    Store the service container for API access.

    Args:
        services: The ServiceContainer with the streaming services
    """
    global _service_container
    _service_container = services


async def get_service_container() -> ServiceContainer:
    """
    FastAPI dependency for accessing service container.

    Raises:
        HTTPException: 503 Service Unavailable if services not initialized
    """
    if _service_container is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service container not initialized. Server may still be starting."
        )
    return _service_container
