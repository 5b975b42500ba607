from __future__ import annotations
from typing import TYPE_CHECKING

from lifecycle.shutdown_protocol import IShutdownHandler
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from services.stream_scheduler import StreamScheduler

log = get_logger().for_category(LogCategory.SHUTDOWN)


class StreamShutdownHandler(IShutdownHandler):
    """
    Shutdown handler for live animation streams.

    Ends every session so terminals get their cursor back before the
    HTTP server drops the connections.

    Priority: 100 (first)
    """

    def __init__(self, scheduler: "StreamScheduler"):
        self.scheduler = scheduler

    @property
    def shutdown_priority(self) -> int:
        return 100

    async def shutdown(self) -> None:
        count = self.scheduler.active_count
        if count == 0:
            log.debug("No active streams")
            return

        log.info(f"Ending {count} active stream{'s' if count != 1 else ''}...")
        await self.scheduler.stop_all()
        log.debug("Streams ended")
