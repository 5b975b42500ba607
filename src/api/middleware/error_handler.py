"""
Error handling for the API

Domain errors raised in route handlers are converted to plain-text
responses here, so handlers only decide WHICH error happened. Anything else
that escapes a handler becomes a 500 "Internal server error".
"""

import uuid
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from utils.logger import get_logger
from models.enums import LogCategory

log = get_logger().for_category(LogCategory.API)


class DomainError(Exception):
    """Base class for errors that map to an HTTP status"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
        status_code: int = 400
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)


class AnimationNotFoundError(DomainError):
    """Requested name is not an animation directory"""
    def __init__(self, name: str):
        super().__init__(
            code="ANIMATION_NOT_FOUND",
            message="Not found",
            details={"name": name},
            status_code=404
        )


class AnimationLoadError(DomainError):
    """Animation directory exists but its assets failed to load"""
    def __init__(self, name: str, error: str):
        super().__init__(
            code="ANIMATION_LOAD_FAILED",
            message=f"Error loading animation: {error}",
            details={"name": name, "error": error},
            status_code=500
        )


class MethodNotAllowedError(DomainError):
    """Only GET is served"""
    def __init__(self, method: str):
        super().__init__(
            code="METHOD_NOT_ALLOWED",
            message="Only GET is supported",
            details={"method": method},
            status_code=405
        )


def plain_text(message: str, status_code: int) -> PlainTextResponse:
    return PlainTextResponse(f"{message}\n", status_code=status_code)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI app"""

    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError):
        """Handle expected request failures (404, 405, broken animation)"""
        request_id = str(uuid.uuid4())

        log.warn(
            f"Domain error ({request_id}): {exc.code} - {exc.message}",
            path=request.url.path,
            **exc.details
        )

        return plain_text(exc.message, exc.status_code)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors"""
        request_id = str(uuid.uuid4())

        log.error(
            f"Unexpected error ({request_id}): {type(exc).__name__}: {str(exc)}",
            path=request.url.path,
            exception_type=type(exc).__name__,
        )

        return plain_text("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)
