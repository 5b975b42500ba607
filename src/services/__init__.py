"""Services layer"""

from .asset_source import AssetSource
from .animation_store import AnimationStore
from .client_classifier import ClientClassifier
from .listing_formatter import ListingFormatter
from .stream_connection import StreamConnection
from .stream_scheduler import StreamScheduler, StreamSession
from .service_container import ServiceContainer

__all__ = [
    "AssetSource",
    "AnimationStore",
    "ClientClassifier",
    "ListingFormatter",
    "StreamConnection",
    "StreamScheduler",
    "StreamSession",
    "ServiceContainer",
]
