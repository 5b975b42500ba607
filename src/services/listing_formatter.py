"""Listing formatter - Plain-text summary of available animations"""

import asyncio
from typing import Iterable, Optional

from models.animation import Animation
from services.animation_store import AnimationStore


def format_number(value) -> str:
    """12.0 → '12', 12.5 → '12.5'"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_entry(requested_name: str, animation: Animation) -> str:
    """One `- ...` line for the listing."""
    if not animation.ok:
        return f"- {requested_name} (error: {animation.error})"

    meta = animation.metadata
    fps_part = f"fps {format_number(meta.fps)}" if meta.fps else "no fps"
    interval_part = f", interval {meta.interval}ms" if meta.interval is not None and meta.interval > 0 else ""
    loop_part = "true" if meta.loop else "false"
    return f"- {meta.name} ({fps_part}{interval_part}, loop {loop_part}, frames {animation.frame_count})"


class ListingFormatter:
    """Renders the /list response; every entry goes through the store cache."""

    HEADER = "Available animations:"

    def __init__(self, store: AnimationStore, root_label: Optional[str] = None):
        self.store = store
        self.root_label = root_label or store.source.root.name

    async def format(self, names: Iterable[str]) -> str:
        names = list(names)
        if not names:
            return f"{self.HEADER}\n(none found in {self.root_label}/)\n"

        animations = await asyncio.gather(*(self.store.load(name) for name in names))
        lines = [self.HEADER]
        lines.extend(format_entry(name, anim) for name, anim in zip(names, animations))
        return "\n".join(lines) + "\n"
