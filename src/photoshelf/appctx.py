"""Wiring of the gallery's collaborators, shared by the CLI and the GUI facade."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .application.collection_store import CollectionStore
from .application.use_cases import AdmitAssetsUseCase, DeleteAssetUseCase, RotateAssetUseCase
from .errors.handler import ErrorHandler
from .events.bus import EventBus
from .infrastructure.persistence import JsonKeyValueStore, SnapshotAdapter
from .infrastructure.persistence.snapshot_adapter import PayloadMode
from .utils.logging import get_logger


@dataclass
class GalleryContext:
    """Container object holding one gallery and the services that act on it."""

    storage_path: Optional[Path] = None
    payload_mode: PayloadMode = "base64"
    event_bus: EventBus = field(default_factory=EventBus)

    def __post_init__(self) -> None:
        self.logger = get_logger()
        self.kv_store = JsonKeyValueStore(self.storage_path)
        self.snapshots = SnapshotAdapter(self.kv_store, payload_mode=self.payload_mode)
        self.error_handler = ErrorHandler(self.logger, self.event_bus)
        self.store = CollectionStore(self.snapshots, self.event_bus, self.error_handler)
        self.admit = AdmitAssetsUseCase(self.store, self.event_bus)
        self.delete = DeleteAssetUseCase(self.store, self.event_bus)
        self.rotate = RotateAssetUseCase(self.store, self.event_bus)

    def load(self) -> "GalleryContext":
        """Restore the persisted collection; returns ``self`` for chaining."""

        self.store.load()
        return self


__all__ = ["GalleryContext"]
