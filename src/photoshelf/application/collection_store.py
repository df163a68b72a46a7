"""The ordered, size-bounded collection of admitted assets.

:class:`CollectionStore` is the only place the collection is mutated.  Each
mutation writes the *complete* collection through the snapshot repository
before the method returns, so the durable copy never lags more than one
operation behind memory.  A failed write is logged and reported, but the
in-memory change stands.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Sequence

from ..config import MAX_COLLECTION_SIZE
from ..domain.models import ImageAsset
from ..domain.repositories import ISnapshotRepository
from ..errors import AssetNotFoundError, CapacityExceededError, SnapshotSaveError
from ..errors.handler import ErrorHandler, ErrorSeverity
from ..events.bus import EventBus
from ..events.gallery_events import (
    CollectionChangedEvent,
    SnapshotSavedEvent,
    SnapshotSaveFailedEvent,
)


class CollectionStore:
    def __init__(
        self,
        repository: ISnapshotRepository,
        event_bus: EventBus,
        error_handler: Optional[ErrorHandler] = None,
        capacity: int = MAX_COLLECTION_SIZE,
    ):
        self._repo = repository
        self._events = event_bus
        self._error_handler = error_handler
        self._capacity = capacity
        self._assets: List[ImageAsset] = []
        self._logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def capacity(self) -> int:
        return self._capacity

    def list(self) -> List[ImageAsset]:
        """Return a copy of the collection in display order."""
        return list(self._assets)

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[ImageAsset]:
        return iter(list(self._assets))

    def remaining(self) -> int:
        return self._capacity - len(self._assets)

    def get(self, index: int) -> ImageAsset:
        self._check_index(index)
        return self._assets[index]

    def index_of(self, asset_id: str) -> int:
        """Return the current position of *asset_id*, or ``-1``."""
        for position, asset in enumerate(self._assets):
            if asset.id == asset_id:
                return position
        return -1

    def find(self, asset_id: str) -> Optional[ImageAsset]:
        position = self.index_of(asset_id)
        return self._assets[position] if position >= 0 else None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load(self) -> List[ImageAsset]:
        """Replace the in-memory collection with the persisted snapshot.

        Called once at startup.  Extra entries beyond the capacity (a snapshot
        edited by hand, or written by a build with a larger limit) are dropped.
        """
        restored = list(self._repo.load())
        if len(restored) > self._capacity:
            self._logger.warning(
                "Snapshot holds %d assets; keeping the first %d",
                len(restored),
                self._capacity,
            )
            restored = restored[: self._capacity]
        self._assets = restored
        self._logger.info("Loaded %d assets from snapshot", len(self._assets))
        self._events.publish(CollectionChangedEvent(
            asset_ids=tuple(a.id for a in self._assets),
            reason="load",
            source="CollectionStore",
        ))
        return self.list()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def insert(self, assets: Iterable[ImageAsset]) -> List[ImageAsset]:
        """Append *assets* in order.

        Raises:
            CapacityExceededError: the batch does not fit; nothing is appended.
        """
        batch = list(assets)
        if len(self._assets) + len(batch) > self._capacity:
            raise CapacityExceededError(
                f"Cannot add {len(batch)} assets to a collection of "
                f"{len(self._assets)} (limit {self._capacity})"
            )
        if not batch:
            return []
        self._assets.extend(batch)
        self._commit("insert")
        return batch

    def delete_at(self, index: int) -> ImageAsset:
        self._check_index(index)
        removed = self._assets.pop(index)
        self._commit("delete")
        return removed

    def replace_at(self, index: int, asset: ImageAsset) -> ImageAsset:
        """Swap the entry at *index* for *asset* and return the previous entry."""
        self._check_index(index)
        previous = self._assets[index]
        self._assets[index] = asset
        self._commit("replace")
        return previous

    def replace(self, asset: ImageAsset) -> int:
        """Swap the entry sharing ``asset.id`` for *asset*; return its position.

        Raises:
            AssetNotFoundError: no entry with that id is present any more.
        """
        position = self.index_of(asset.id)
        if position < 0:
            raise AssetNotFoundError(f"Asset {asset.id} ({asset.name}) is no longer in the collection")
        self.replace_at(position, asset)
        return position

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _check_index(self, index: int) -> None:
        # Negative indices are refused; the UI only ever addresses grid cells.
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(self._assets):
            raise AssetNotFoundError(f"No asset at index {index} (collection has {len(self._assets)})")

    def _commit(self, reason: str) -> None:
        snapshot: Sequence[ImageAsset] = tuple(self._assets)
        self._persist(snapshot)
        self._events.publish(CollectionChangedEvent(
            asset_ids=tuple(a.id for a in snapshot),
            reason=reason,
            source="CollectionStore",
        ))

    def _persist(self, snapshot: Sequence[ImageAsset]) -> None:
        try:
            saved = self._repo.save(snapshot)
        except Exception as exc:
            # Repositories should report failure by returning False; anything
            # raised is treated the same way.
            self._logger.exception("Snapshot repository raised while saving")
            saved = False
            reason = str(exc)
        else:
            reason = "" if saved else "write failed"

        if saved:
            self._events.publish(SnapshotSavedEvent(asset_count=len(snapshot), source="CollectionStore"))
            return

        self._events.publish(SnapshotSaveFailedEvent(
            asset_count=len(snapshot),
            reason=reason,
            source="CollectionStore",
        ))
        error = SnapshotSaveError(f"Could not save gallery ({reason}); changes are kept in memory only")
        if self._error_handler is not None:
            self._error_handler.handle(error, ErrorSeverity.WARNING, {"asset_count": len(snapshot)})
        else:
            self._logger.warning("%s", error)


__all__ = ["CollectionStore"]
