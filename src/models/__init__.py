"""
Models package - Data models for the animation streaming server
"""

from .enums import ClientKind, LogLevel, LogCategory
from .animation import Animation, AnimationMetadata
from .config import AppConfig
from .errors import (
    AnimationError,
    AssetUnreadableError,
    MalformedMetadataError,
    NoFramesFoundError,
    StreamWriteError,
)

__all__ = [
    'ClientKind',
    'LogLevel',
    'LogCategory',
    'Animation',
    'AnimationMetadata',
    'AppConfig',
    'AnimationError',
    'AssetUnreadableError',
    'MalformedMetadataError',
    'NoFramesFoundError',
    'StreamWriteError',
]
