"""Service Container - Dependency injection container for all core services"""

from dataclasses import dataclass

from models.config import AppConfig
from services.asset_source import AssetSource
from services.animation_store import AnimationStore
from services.client_classifier import ClientClassifier
from services.listing_formatter import ListingFormatter
from services.stream_scheduler import StreamScheduler


@dataclass
class ServiceContainer:
    """
    Centralized dependency injection container for the streaming services.

    Services included:
    - asset_source: animation directory enumeration and file reads
    - animation_store: parsed animation cache (lives for the process)
    - classifier: browser vs. terminal decision
    - scheduler: live streaming sessions
    - listing: /list rendering

    Usage:
        services = ServiceContainer.build(config, frames_root)
        set_service_container(services)

        @router.get("/list")
        async def list_animations(services: ServiceContainer = Depends(get_service_container)):
            ...
    """

    config: AppConfig
    asset_source: AssetSource
    animation_store: AnimationStore
    classifier: ClientClassifier
    scheduler: StreamScheduler
    listing: ListingFormatter

    @classmethod
    def build(cls, config: AppConfig, frames_root) -> "ServiceContainer":
        """Wire all services from configuration."""
        source = AssetSource(
            frames_root,
            metadata_file=config.animations.metadata_file,
            art_file=config.animations.art_file,
        )
        store = AnimationStore(source, frame_separator=config.animations.frame_separator)
        return cls(
            config=config,
            asset_source=source,
            animation_store=store,
            classifier=ClientClassifier(),
            scheduler=StreamScheduler(
                default_interval_ms=config.streaming.default_interval_ms,
                min_interval_ms=config.streaming.min_interval_ms,
            ),
            listing=ListingFormatter(store),
        )
