"""
Stream Scheduler

Plays one animation per client connection: writes a frame, sleeps for the
session interval, repeats. Non-looping animations end after the last frame;
looping ones run until the client disconnects.
"""

import asyncio
import itertools
import math
from numbers import Real
from typing import Any, Optional, Protocol, Callable, Set

from lifecycle.task_registry import create_tracked_task, TaskCategory
from models.animation import Animation
from models.errors import StreamWriteError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.STREAM)

# ANSI control sequences
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CLEAR_SCREEN = "\x1b[2J"
CURSOR_HOME = "\x1b[H"

RESET_SEQUENCE = HIDE_CURSOR + CLEAR_SCREEN + CURSOR_HOME
FRAME_PREFIX = CLEAR_SCREEN + CURSOR_HOME

DEFAULT_INTERVAL_MS = 100
MIN_INTERVAL_MS = 10


class Connection(Protocol):
    """What a session needs from the client connection."""

    @property
    def closed(self) -> bool: ...

    def on_close(self, callback: Callable[[], None]) -> None: ...

    async def write(self, data: str) -> None: ...

    def close(self) -> None: ...


def _field(metadata: Any, key: str) -> Any:
    if metadata is None:
        return None
    if isinstance(metadata, dict):
        return metadata.get(key)
    return getattr(metadata, key, None)


def _positive_number(value: Any) -> bool:
    return (
        isinstance(value, Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


def compute_interval_ms(
    metadata: Any,
    default_ms: int = DEFAULT_INTERVAL_MS,
    min_ms: int = MIN_INTERVAL_MS,
) -> int:
    """
    Resolve the tick period for an animation.

    `metadata` is an AnimationMetadata or a plain dict with optional
    `interval` / `fps` keys.

    interval > 0 → max(min_ms, floor(interval))
    fps > 0      → max(min_ms, round(1000 / fps)), halves round up
    otherwise    → default_ms
    """
    interval = _field(metadata, "interval")
    if _positive_number(interval):
        return max(min_ms, math.floor(interval))

    fps = _field(metadata, "fps")
    if _positive_number(fps):
        return max(min_ms, math.floor(1000 / fps + 0.5))

    return default_ms


_session_ids = itertools.count(1)


class StreamSession:
    """
    Playback state for one connection.

    `stop()` is the only way to end a session and is safe to call any number
    of times from any path (tick, disconnect, write error, shutdown). Once
    `ended` is set no further writes happen; a tick is then a no-op.
    """

    def __init__(
        self,
        animation: Animation,
        connection: Connection,
        interval_ms: int,
        on_end: Optional[Callable[["StreamSession"], None]] = None,
    ):
        self.id = next(_session_ids)
        self.animation = animation
        self.connection = connection
        self.interval_ms = interval_ms
        self.frame_index = 0
        self.frames_sent = 0
        self.ended = False
        self.end_reason: Optional[str] = None
        self._task: Optional[asyncio.Task] = None
        self._on_end = on_end

    def __repr__(self) -> str:
        return (
            f"StreamSession(id={self.id}, animation={self.animation.name!r}, "
            f"frame_index={self.frame_index}, ended={self.ended})"
        )

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    async def _write(self, data: str) -> bool:
        if self.ended:
            return False
        try:
            await self.connection.write(data)
        except (StreamWriteError, OSError) as ex:
            log.debug(f"Session {self.id} write failed: {ex}")
            self.stop("write failed")
            return False
        return True

    async def begin(self) -> None:
        """Reset the client's terminal and show the first frame."""
        self.connection.on_close(self._on_connection_closed)
        if not await self._write(RESET_SEQUENCE):
            return
        await self.tick()

    async def tick(self) -> None:
        """Write the current frame and advance."""
        if self.ended:
            return

        frames = self.animation.frames
        frame = frames[self.frame_index] if self.frame_index < len(frames) else ""
        if not await self._write(FRAME_PREFIX + frame):
            return
        self.frames_sent += 1

        next_index = self.frame_index + 1
        if next_index < len(frames):
            self.frame_index = next_index
        elif self.animation.loop:
            self.frame_index = 0
        else:
            await self.end("finished")

    async def run(self) -> None:
        """Tick loop; frames are never closer together than interval_ms."""
        delay = self.interval_ms / 1000
        while not self.ended:
            await asyncio.sleep(delay)
            await self.tick()

    async def end(self, reason: str) -> None:
        """Restore the cursor, stop, and close the connection."""
        if self.ended:
            return
        await self._write(SHOW_CURSOR)
        self.stop(reason)
        self.connection.close()

    def stop(self, reason: str = "stopped") -> None:
        """Idempotent stop transition."""
        if self.ended:
            return
        self.ended = True
        self.end_reason = reason

        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

        log.info(
            f"Session {self.id} ended ({reason})",
            animation=self.animation.name,
            frames_sent=self.frames_sent,
        )
        if self._on_end is not None:
            self._on_end(self)

    def _on_connection_closed(self) -> None:
        self.stop("client disconnected")


class StreamScheduler:
    """
    Owns all live streaming sessions.

    Example:
        scheduler = StreamScheduler()
        connection = StreamConnection()
        session = await scheduler.stream(connection, animation)
        return AnimationStreamResponse(connection, ...)
    """

    def __init__(self, default_interval_ms: int = DEFAULT_INTERVAL_MS, min_interval_ms: int = MIN_INTERVAL_MS):
        self.default_interval_ms = default_interval_ms
        self.min_interval_ms = min_interval_ms
        self._sessions: Set[StreamSession] = set()

    @property
    def active_sessions(self) -> Set[StreamSession]:
        return set(self._sessions)

    @property
    def active_count(self) -> int:
        return len(self._sessions)

    def compute_interval_ms(self, metadata: Any) -> int:
        return compute_interval_ms(metadata, self.default_interval_ms, self.min_interval_ms)

    async def stream(self, connection: Connection, animation: Animation) -> StreamSession:
        """
        Start playing `animation` on `connection`.

        Returns once the reset sequence and first frame are written; later
        frames come from a background tick task. Write failures end the
        session quietly instead of raising.
        """
        if not animation.ok or not animation.frames:
            raise ValueError(f"Animation '{animation.name}' is not playable: {animation.error}")

        interval_ms = self.compute_interval_ms(animation.metadata)
        session = StreamSession(animation, connection, interval_ms, on_end=self._discard)
        self._sessions.add(session)

        log.info(
            f"Session {session.id} started",
            animation=animation.name,
            frames=animation.frame_count,
            interval_ms=interval_ms,
            loop=animation.loop,
        )

        await session.begin()
        if not session.ended:
            session._task = create_tracked_task(
                session.run(),
                category=TaskCategory.STREAM,
                description=f"Stream '{animation.name}' session {session.id}",
            )
        return session

    def _discard(self, session: StreamSession) -> None:
        self._sessions.discard(session)

    async def stop_all(self, timeout: float = 1.0) -> None:
        """End every session, restoring cursors where the client still listens."""
        sessions = list(self.active_sessions)
        if not sessions:
            return

        log.info(f"Stopping {len(sessions)} streaming sessions")
        for session in sessions:
            try:
                await asyncio.wait_for(session.end("server shutdown"), timeout=timeout)
            except asyncio.TimeoutError:
                log.warn(f"Session {session.id} did not end in time")
            session.stop("server shutdown")
            session.connection.close()
