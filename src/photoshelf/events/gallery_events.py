from dataclasses import dataclass, field

from .domain_events import DomainEvent


@dataclass(frozen=True)
class CollectionChangedEvent(DomainEvent):
    asset_ids: tuple[str, ...] = ()
    reason: str = ""


@dataclass(frozen=True)
class AssetsAdmittedEvent(DomainEvent):
    asset_ids: list[str] = field(default_factory=list)
    rejected_count: int = 0


@dataclass(frozen=True)
class AssetDeletedEvent(DomainEvent):
    asset_id: str = ""
    index: int = -1


@dataclass(frozen=True)
class AssetRotatedEvent(DomainEvent):
    asset_id: str = ""
    index: int = -1
    direction: str = ""


@dataclass(frozen=True)
class SnapshotSavedEvent(DomainEvent):
    asset_count: int = 0


@dataclass(frozen=True)
class SnapshotSaveFailedEvent(DomainEvent):
    asset_count: int = 0
    reason: str = ""
