"""
Method guard middleware

The server is read-only: every method except GET is answered with 405
before routing, so unknown paths also get 405 for non-GET requests.

Written as plain ASGI middleware so streaming responses pass through
untouched.
"""

from starlette.types import ASGIApp, Receive, Scope, Send

from api.middleware.error_handler import MethodNotAllowedError, plain_text
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)

ALLOWED_METHODS = frozenset({"GET"})


class MethodGuardMiddleware:
    """405 for anything but GET."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] not in ALLOWED_METHODS:
            error = MethodNotAllowedError(scope["method"])
            log.debug(f"Rejected {scope['method']} {scope.get('path', '')}")
            response = plain_text(error.message, error.status_code)
            await response(scope, receive, send)
            return
        await self.app(scope, receive, send)
