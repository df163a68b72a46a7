from .bus import EventBus, Subscription
from .domain_events import DomainEvent
from .gallery_events import (
    AssetDeletedEvent,
    AssetRotatedEvent,
    AssetsAdmittedEvent,
    CollectionChangedEvent,
    SnapshotSavedEvent,
    SnapshotSaveFailedEvent,
)

__all__ = [
    "AssetDeletedEvent",
    "AssetRotatedEvent",
    "AssetsAdmittedEvent",
    "CollectionChangedEvent",
    "DomainEvent",
    "EventBus",
    "SnapshotSaveFailedEvent",
    "SnapshotSavedEvent",
    "Subscription",
]
