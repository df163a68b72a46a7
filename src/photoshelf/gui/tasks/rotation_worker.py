"""Worker that rotates an asset off the UI thread."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from PySide6.QtCore import QObject, QRunnable, Signal

from ...core.rotation import RotationStage, rotate_asset
from ...domain.models import ImageAsset, RotationDirection
from ...errors import TransformError


@dataclass(frozen=True)
class RotationJob:
    asset: ImageAsset
    direction: RotationDirection
    job_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def asset_id(self) -> str:
        return self.asset.id


class RotationWorkerSignals(QObject):
    """Signals exposed by :class:`RotationWorker`.

    The container is separate from the runnable so slots execute on the
    thread that owns the receiver, regardless of which pool thread ran the job.
    """

    stageChanged = Signal(object, str)
    """Emitted with the job and the stage name as each stage starts."""

    finished = Signal(object, object)
    """Emitted with the job and the rotated :class:`ImageAsset`."""

    failed = Signal(object, str)
    """Emitted with the job and an error message; nothing was produced."""


class RotationWorker(QRunnable):
    """Decode, rotate and re-encode one asset.

    The worker never touches the collection.  Committing the result is up to
    whoever receives ``finished``.
    """

    def __init__(self, job: RotationJob) -> None:
        super().__init__()
        self._job = job
        self.signals = RotationWorkerSignals()

    @property
    def job(self) -> RotationJob:
        return self._job

    def run(self) -> None:  # type: ignore[override]
        job = self._job
        try:
            rotated = rotate_asset(
                job.asset,
                job.direction,
                on_stage=lambda stage: self.signals.stageChanged.emit(job, stage.value),
            )
        except TransformError as exc:
            self.signals.stageChanged.emit(job, RotationStage.FAILED.value)
            self.signals.failed.emit(job, str(exc))
            return
        except Exception as exc:  # pragma: no cover - unexpected Pillow failures
            # A worker thread has nobody to propagate to; report it like a
            # transform failure so the queue for this asset keeps moving.
            self.signals.stageChanged.emit(job, RotationStage.FAILED.value)
            self.signals.failed.emit(job, f"Could not rotate {job.asset.name}: {exc}")
            return

        self.signals.finished.emit(job, rotated)


__all__ = ["RotationJob", "RotationWorker", "RotationWorkerSignals"]
