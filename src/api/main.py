"""
FastAPI Application Factory

Assembles the app:
- Routes (health check, usage, listing, playback)
- Middleware (GET-only guard)
- Exception handlers (domain errors → plain text)
- Service container for dependency injection

The factory takes the ServiceContainer explicitly so tests can build an app
over a temporary asset directory.
"""
from typing import Optional

from fastapi import FastAPI

from api.routes import animations, system
from api.middleware.error_handler import register_exception_handlers
from api.middleware.method_guard import MethodGuardMiddleware
from api.dependencies import set_service_container
from services.service_container import ServiceContainer
from utils.logger import get_logger
from models.enums import LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)


def create_app(
    services: Optional[ServiceContainer] = None,
    title: str = "ASCII Animation Server",
    description: str = "Streams text animations into terminals over HTTP",
    version: str = system.API_VERSION,
    docs_enabled: bool = False,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        services: ServiceContainer used by every endpoint
        title: API title (shown in docs)
        description: API description
        version: API version
        docs_enabled: Serve /docs and /openapi.json (off by default: those
                      paths would otherwise be animation names)

    Returns:
        Configured FastAPI application ready to run
    """
    app = FastAPI(
        title=title,
        description=description,
        version=version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )

    log.info(f"Creating FastAPI app: {title} v{version}")

    if services is not None:
        set_service_container(services)
        log.debug("Service container registered with API")

    # =========================================================================
    # Middleware
    # =========================================================================

    app.add_middleware(MethodGuardMiddleware)

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    register_exception_handlers(app)

    log.debug("Exception handlers registered")

    # =========================================================================
    # Routes
    # =========================================================================
    # System routes go first: /{name} would otherwise capture /api/health.

    app.include_router(system.router)
    app.include_router(animations.router)

    log.debug("Routes registered: /api/health, /, /list, /{name}")

    log.info(f"FastAPI app created successfully: {title}")

    return app
