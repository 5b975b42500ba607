"""
Animation domain models

Immutable records produced by AnimationStore and shared read-only by
streaming sessions.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

Number = Union[int, float]


@dataclass(frozen=True)
class AnimationMetadata:
    """Validated timing metadata from metadata.json"""
    name: str
    loop: bool = False
    fps: Optional[Number] = None       # positive number or None
    interval: Optional[int] = None     # floored milliseconds or None


@dataclass(frozen=True)
class Animation:
    """
    One parsed animation directory.

    Exactly one of (metadata + frames) or error is populated. Failed loads are
    cached as well, so `error` entries live as long as successful ones.
    """
    name: str
    metadata: Optional[AnimationMetadata] = None
    frames: Tuple[str, ...] = ()
    error: Optional[str] = None

    @classmethod
    def failed(cls, name: str, message: str) -> "Animation":
        return cls(name=name, error=message)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    @property
    def loop(self) -> bool:
        return bool(self.metadata and self.metadata.loop)
