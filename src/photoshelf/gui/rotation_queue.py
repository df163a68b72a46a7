"""Per-asset serialization of asynchronous rotations.

Decoding and encoding run on a thread pool, so two rotations of the same
image issued back to back could otherwise finish in either order and the later
commit would silently discard the earlier one.  :class:`RotationQueue` keeps at
most one rotation in flight per asset id.  Further requests for that asset
wait in FIFO order and each one starts from the committed result of its
predecessor, so requests commit in the order they were made.

Commits look the asset up by id rather than by the index it had when the
request was made; deleting a neighbour while a rotation is running therefore
cannot make the result land on the wrong cell.  If the asset itself was
deleted the result is dropped.

There is no cancellation or timeout.  A worker that never returns keeps its
asset's queue blocked; other assets are unaffected.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, Optional

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from ..application.collection_store import CollectionStore
from ..application.use_cases.rotate_asset import RotateAssetUseCase
from ..core.rotation import RotationStage
from ..domain.models import ImageAsset, RotationDirection
from ..errors import AssetNotFoundError
from .tasks.rotation_worker import RotationJob, RotationWorker

LOGGER = logging.getLogger(__name__)


class RotationQueue(QObject):
    """Run rotations on a thread pool, one at a time per asset."""

    rotationStarted = Signal(str, str)
    """``(asset_id, direction)`` when a worker is dispatched."""

    stageChanged = Signal(str, str)
    """``(asset_id, stage)`` as the worker moves through its stages."""

    rotationCommitted = Signal(object, int, str)
    """``(asset, index, direction)`` once the rotated asset is in the collection."""

    rotationFailed = Signal(str, str)
    """``(asset_id, message)`` when nothing was committed."""

    idle = Signal()
    """Emitted when the last pending rotation has been resolved."""

    def __init__(
        self,
        store: CollectionStore,
        rotate_use_case: RotateAssetUseCase,
        thread_pool: Optional[QThreadPool] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._rotate = rotate_use_case
        self._pool = thread_pool or QThreadPool.globalInstance()
        self._pending: Dict[str, Deque[RotationDirection]] = {}
        self._in_flight: Dict[str, RotationWorker] = {}

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------
    def is_busy(self, asset_id: Optional[str] = None) -> bool:
        if asset_id is None:
            return bool(self._in_flight)
        return asset_id in self._in_flight

    def pending_count(self, asset_id: str) -> int:
        """Requests for *asset_id* not yet dispatched (excludes the running one)."""
        return len(self._pending.get(asset_id, ()))

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------
    def request(self, asset_id: str, direction: RotationDirection | str) -> None:
        direction = RotationDirection.parse(direction)
        self._pending.setdefault(asset_id, deque()).append(direction)
        if asset_id in self._in_flight:
            LOGGER.debug(
                "Queued %s rotation of %s behind running job (%d waiting)",
                direction.value,
                asset_id,
                len(self._pending[asset_id]),
            )
            return
        self._start_next(asset_id)

    def request_at(self, index: int, direction: RotationDirection | str) -> str:
        """Queue a rotation of whatever sits at *index* now; returns its asset id."""

        asset = self._store.get(index)
        self.request(asset.id, direction)
        return asset.id

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _start_next(self, asset_id: str) -> None:
        waiting = self._pending.get(asset_id)
        if not waiting:
            self._pending.pop(asset_id, None)
            self._maybe_idle()
            return

        direction = waiting.popleft()
        source = self._store.find(asset_id)
        if source is None:
            dropped = 1 + len(waiting)
            self._pending.pop(asset_id, None)
            LOGGER.warning("Asset %s was removed; dropping %d queued rotation(s)", asset_id, dropped)
            self.rotationFailed.emit(asset_id, "Image was removed before it could be rotated.")
            self._maybe_idle()
            return

        self._dispatch(RotationJob(asset=source, direction=direction))

    def _dispatch(self, job: RotationJob) -> None:
        worker = RotationWorker(job)
        worker.signals.stageChanged.connect(self._on_stage_changed)
        worker.signals.finished.connect(self._on_finished)
        worker.signals.failed.connect(self._on_failed)
        self._in_flight[job.asset_id] = worker
        self.rotationStarted.emit(job.asset_id, job.direction.value)
        self._pool.start(worker)

    @Slot(object, str)
    def _on_stage_changed(self, job: RotationJob, stage: str) -> None:
        self.stageChanged.emit(job.asset_id, stage)

    @Slot(object, object)
    def _on_finished(self, job: RotationJob, rotated: ImageAsset) -> None:
        self._in_flight.pop(job.asset_id, None)
        try:
            position = self._rotate.commit(rotated, job.direction)
        except AssetNotFoundError:
            LOGGER.warning("Discarding rotation of %s: asset was removed while it ran", job.asset.name)
            self.rotationFailed.emit(job.asset_id, f"{job.asset.name} was removed before the rotation finished.")
        else:
            self.stageChanged.emit(job.asset_id, RotationStage.COMMITTED.value)
            self.rotationCommitted.emit(rotated, position, job.direction.value)
        self._start_next(job.asset_id)

    @Slot(object, str)
    def _on_failed(self, job: RotationJob, message: str) -> None:
        self._in_flight.pop(job.asset_id, None)
        LOGGER.warning("Rotation of %s failed: %s", job.asset.name, message)
        self.rotationFailed.emit(job.asset_id, message)
        self._start_next(job.asset_id)

    def _maybe_idle(self) -> None:
        if not self._in_flight and not any(self._pending.values()):
            self.idle.emit()


__all__ = ["RotationQueue"]
