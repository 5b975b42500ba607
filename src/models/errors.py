"""
Animation error taxonomy

Parse and read failures are caught by AnimationStore and cached as
Animation.error; StreamWriteError only ever ends a streaming session.
"""


class AnimationError(Exception):
    """Base class for animation loading and streaming errors"""


class AssetUnreadableError(AnimationError):
    """metadata.json or art.txt is missing or cannot be read"""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"Cannot read {filename}: {reason}")


class MalformedMetadataError(AnimationError):
    """Metadata document is not valid JSON or not a JSON object"""


class NoFramesFoundError(AnimationError):
    """Art document has no non-empty frame"""


class StreamWriteError(AnimationError):
    """Write to a streaming connection failed (client gone)"""
