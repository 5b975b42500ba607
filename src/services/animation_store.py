"""Animation store - Parses animation assets once and caches the result"""

import asyncio
import json
import math
from numbers import Real
from typing import Any, Dict, List, Optional, Tuple

from models.animation import Animation, AnimationMetadata
from models.errors import AnimationError, MalformedMetadataError, NoFramesFoundError
from services.asset_source import AssetSource
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.STORE)


def coerce_loop(value: Any) -> bool:
    """
    Total truthiness rule for the `loop` field.

    bool → itself; None → False; number → non-zero and not NaN;
    string → non-empty; any other JSON value (list, object) → True.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, Real):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


def _finite_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def parse_metadata(raw: str, fallback_name: str, metadata_file: str = "metadata.json") -> AnimationMetadata:
    """
    Validate a metadata document.

    Raises:
        MalformedMetadataError: not JSON, or not a JSON object
    """
    try:
        data = json.loads(raw)
    except ValueError as ex:
        raise MalformedMetadataError(f"Invalid JSON in {metadata_file}") from ex

    if not isinstance(data, dict):
        raise MalformedMetadataError("Invalid metadata content")

    interval = data.get("interval")
    interval = math.floor(interval) if _finite_number(interval) else None

    fps = data.get("fps")
    if not (_finite_number(fps) and fps > 0):
        fps = None

    name = data.get("name")
    if not isinstance(name, str) or name.strip() == "":
        name = fallback_name

    return AnimationMetadata(
        name=name,
        loop=coerce_loop(data.get("loop")),
        fps=fps,
        interval=interval,
    )


def split_frames(raw: str, separator: str = "====FRAME====", art_file: str = "art.txt") -> Tuple[str, ...]:
    """
    Split an art document into frames on the separator line.

    Raises:
        NoFramesFoundError: every resulting frame is empty
    """
    normalized = raw.replace("\r\n", "\n")
    frames = normalized.split(f"\n{separator}\n")
    if not frames or all(frame == "" for frame in frames):
        raise NoFramesFoundError(f"No frames found in {art_file}")
    return tuple(frames)


class AnimationStore:
    """
    Process-wide animation cache

    Entries are created lazily on first load and never evicted or refreshed;
    a changed asset needs a restart. Failed loads are cached too, so a broken
    animation is parsed once.

    Concurrent first loads of one name are serialized by a per-name lock:
    the second caller waits and gets the entry the first one stored.
    """

    def __init__(self, source: AssetSource, frame_separator: str = "====FRAME===="):
        self.source = source
        self.frame_separator = frame_separator
        self._cache: Dict[str, Animation] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}
        self.parse_count = 0

    def __contains__(self, name: str) -> bool:
        return name in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def get(self, name: str) -> Optional[Animation]:
        """Cached entry for `name` without loading."""
        return self._cache.get(name)

    def cached_names(self) -> List[str]:
        return list(self._cache.keys())

    async def load(self, name: str) -> Animation:
        """
        Return the animation for `name`, parsing it on first request.

        Never raises for asset problems; they are reported in Animation.error.
        """
        cached = self.get(name)
        if cached is not None:
            return cached

        lock = self._locks.setdefault(name, asyncio.Lock())
        self._lock_users[name] = self._lock_users.get(name, 0) + 1
        try:
            async with lock:
                cached = self.get(name)
                if cached is not None:
                    log.debug(f"Cache filled while waiting: {name}")
                    return cached

                animation = await self._parse(name)
                self._cache[name] = animation
        finally:
            # Last loader out drops the lock, whatever ended the load
            self._lock_users[name] -= 1
            if not self._lock_users[name]:
                del self._lock_users[name]
                self._locks.pop(name, None)

        return animation

    async def _parse(self, name: str) -> Animation:
        self.parse_count += 1
        try:
            metadata_raw, art_raw = await self.source.read(name)
            metadata = parse_metadata(metadata_raw, name, self.source.metadata_file)
            frames = split_frames(art_raw, self.frame_separator, self.source.art_file)
        except AnimationError as ex:
            log.warn(f"Animation '{name}' failed to load", error=str(ex), error_type=type(ex).__name__)
            return Animation.failed(name, str(ex))

        log.info(
            f"Animation '{name}' loaded",
            frames=len(frames),
            loop=metadata.loop,
            fps=metadata.fps,
            interval=metadata.interval,
        )
        return Animation(name=metadata.name, metadata=metadata, frames=frames)
