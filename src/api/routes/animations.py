"""
Animation endpoints - Usage text, listing, and streaming playback

/            usage text
/list        one line per animation directory
/<name>      static page for browsers, live ANSI stream for terminals
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, StreamingResponse
from starlette.types import Receive, Scope, Send

from api.dependencies import get_service_container
from api.middleware.error_handler import AnimationLoadError, AnimationNotFoundError
from models.enums import ClientKind
from services.service_container import ServiceContainer
from services.stream_connection import StreamConnection
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)

router = APIRouter(tags=["Animations"])

USAGE_TEXT = "Available endpoints:\n/list\n/<framename>\n"

BROWSER_TEXT = (
    "Please curl this into the terminal. "
    "Use the /list endpoint to show available frames."
)

STREAM_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "X-Content-Type-Options": "nosniff",
    "X-Accel-Buffering": "no",
}


class AnimationStreamResponse(StreamingResponse):
    """
    Streaming body backed by a StreamConnection.

    The connection is aborted however the response ends, including a client
    that leaves before the first chunk is pulled from the body iterator.
    """

    def __init__(self, connection: StreamConnection, **kwargs):
        super().__init__(connection.iter_chunks(), **kwargs)
        self.connection = connection

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            self.connection.abort()


@router.get("/", response_class=PlainTextResponse, summary="Usage")
async def usage() -> PlainTextResponse:
    return PlainTextResponse(USAGE_TEXT)


@router.get("/list", response_class=PlainTextResponse, summary="List all animations")
@router.get("/list/", response_class=PlainTextResponse, include_in_schema=False)
async def list_animations(
    services: ServiceContainer = Depends(get_service_container)
) -> PlainTextResponse:
    """
    List every animation directory.

    Each entry is loaded through the cache, so listing also warms it.
    Broken animations appear with their error message.
    """
    names = await services.asset_source.list_names()
    body = await services.listing.format(names)
    return PlainTextResponse(body)


@router.get("/{name}", summary="Play an animation")
@router.get("/{name}/{rest:path}", include_in_schema=False)
async def play_animation(
    name: str,
    request: Request,
    services: ServiceContainer = Depends(get_service_container)
):
    """
    Play an animation.

    **Responses:**
    - 404: `name` is not an animation directory (for every client)
    - 500: the animation's assets failed to load
    - 200 text/html: browser clients get instructions
    - 200 text/plain stream: terminal clients get the animation
    """
    if not await services.asset_source.exists(name):
        raise AnimationNotFoundError(name)

    animation = await services.animation_store.load(name)
    if not animation.ok:
        raise AnimationLoadError(name, animation.error)

    user_agent = request.headers.get("user-agent", "")
    if services.classifier.classify(user_agent) is ClientKind.BROWSER:
        log.debug(f"Browser client for '{name}', sending instructions", user_agent=user_agent)
        return HTMLResponse(BROWSER_TEXT)

    connection = StreamConnection()
    await services.scheduler.stream(connection, animation)

    return AnimationStreamResponse(
        connection,
        media_type="text/plain; charset=utf-8",
        headers=STREAM_HEADERS,
    )
