"""
Stream connection - Bridges a streaming session to an HTTP response body.

The session writes text chunks; the ASGI server pulls them through
iter_chunks(), which is handed to a StreamingResponse. When the body iterator
stops for any reason other than a normal close (the client went away, the
response task was cancelled) the connection aborts and tells its listeners.
"""

import asyncio
from collections import deque
from typing import AsyncIterator, Callable, Deque, List

from models.errors import StreamWriteError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.STREAM)


class StreamConnection:
    """
    One client's streaming response

    write() buffers a chunk and applies backpressure once `max_pending`
    chunks are waiting; close() ends the body after the buffer drains;
    abort() drops the buffer and ends immediately.
    """

    def __init__(self, max_pending: int = 32):
        self.max_pending = max_pending
        self._buffer: Deque[str] = deque()
        self._ready = asyncio.Event()
        self._drained = asyncio.Event()
        self._drained.set()
        self._closed = False
        self._aborted = False
        self._close_callbacks: List[Callable[[], None]] = []
        self.bytes_sent = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def aborted(self) -> bool:
        return self._aborted

    def on_close(self, callback: Callable[[], None]) -> None:
        """Register a callback for closure; runs at once if already closed."""
        if self._closed:
            callback()
            return
        self._close_callbacks.append(callback)

    async def write(self, data: str) -> None:
        """
        Queue a chunk for the client.

        Raises:
            StreamWriteError: the connection is closed or was aborted
        """
        if self._closed:
            raise StreamWriteError("connection closed")

        self._buffer.append(data)
        self._ready.set()

        if len(self._buffer) >= self.max_pending:
            self._drained.clear()
            await self._drained.wait()
            if self._aborted:
                raise StreamWriteError("connection aborted")

    def close(self) -> None:
        """Finish the response once buffered chunks are sent."""
        if self._closed:
            return
        self._mark_closed()
        self._ready.set()

    def abort(self) -> None:
        """Drop pending chunks and end the response now (no-op once fully drained)."""
        if self._aborted or (self._closed and not self._buffer):
            return
        self._aborted = True
        self._buffer.clear()
        self._drained.set()
        self._ready.set()
        self._mark_closed()

    def _mark_closed(self) -> None:
        if self._closed:
            return
        self._closed = True
        callbacks, self._close_callbacks = self._close_callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception as ex:
                log.error(f"Close callback failed: {ex}", exc_info=True)

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        """Body iterator for StreamingResponse."""
        completed = False
        try:
            while True:
                while not self._buffer:
                    if self._closed:
                        completed = True
                        return
                    self._ready.clear()
                    await self._ready.wait()

                chunk = self._buffer.popleft()
                if len(self._buffer) < self.max_pending:
                    self._drained.set()

                payload = chunk.encode("utf-8")
                self.bytes_sent += len(payload)
                yield payload
        finally:
            if not completed:
                self.abort()
