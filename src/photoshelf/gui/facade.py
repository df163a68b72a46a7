"""Qt-aware facade that exposes the gallery to a presentation layer."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot
from PySide6.QtGui import QImage

from ..appctx import GalleryContext
from ..application.use_cases import AdmitAssetsRequest, AdmitAssetsResponse, DeleteAssetRequest
from ..config import MSG_ROTATED
from ..domain.models import CandidateFile, ImageAsset, RotationDirection
from ..errors import AssetNotFoundError
from ..errors.handler import ErrorSeverity
from ..events.gallery_events import CollectionChangedEvent, SnapshotSaveFailedEvent
from ..utils.logging import get_logger
from .notifications import NotificationCenter, NotificationSeverity
from .preview import PreviewController
from .rotation_queue import RotationQueue


class GalleryFacade(QObject):
    """Render-free seam between the gallery core and whatever draws it.

    The presentation layer reads :meth:`assets` and listens to the signals
    below; user intents come back in through the public methods.  Everything
    here must be called from the thread that owns the facade.
    """

    collectionChanged = Signal(list)
    errorChanged = Signal(str)
    formatErrorChanged = Signal(str)
    capacityErrorChanged = Signal(str)

    def __init__(
        self,
        context: Optional[GalleryContext] = None,
        *,
        thread_pool: Optional[QThreadPool] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._logger = get_logger()
        self._context = context or GalleryContext()
        self._error = ""
        self._format_error = ""
        self._capacity_error = ""

        self._notifications = NotificationCenter(parent=self)
        self._previews = PreviewController(self)
        self._previews.previewFailed.connect(self._on_preview_failed)

        self._rotations = RotationQueue(
            self._context.store,
            self._context.rotate,
            thread_pool=thread_pool,
            parent=self,
        )
        self._rotations.rotationCommitted.connect(self._on_rotation_committed)
        self._rotations.rotationFailed.connect(self._on_rotation_failed)

        bus = self._context.event_bus
        self._subscriptions = [
            bus.subscribe(CollectionChangedEvent, self._on_collection_changed),
            bus.subscribe(SnapshotSaveFailedEvent, self._on_snapshot_save_failed),
        ]
        self._context.error_handler.register_ui_callback(self._on_error_reported)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def context(self) -> GalleryContext:
        return self._context

    @property
    def notifications(self) -> NotificationCenter:
        return self._notifications

    @property
    def previews(self) -> PreviewController:
        return self._previews

    @property
    def rotations(self) -> RotationQueue:
        return self._rotations

    def assets(self) -> List[ImageAsset]:
        return self._context.store.list()

    def error(self) -> str:
        """The one-line error label: the last message raised by an admission."""
        return self._error

    def format_error(self) -> str:
        return self._format_error

    def capacity_error(self) -> str:
        return self._capacity_error

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load(self) -> List[ImageAsset]:
        """Restore the persisted collection; call once at startup."""

        self._context.load()
        return self.assets()

    def shutdown(self) -> None:
        for sub in self._subscriptions:
            self._context.event_bus.unsubscribe(sub)
        self._subscriptions = []
        self._notifications.dismiss()

    # ------------------------------------------------------------------
    # User intents
    # ------------------------------------------------------------------
    def add_files(self, paths: Iterable[Path]) -> AdmitAssetsResponse:
        """Admit files chosen in a picker or dropped on the window."""

        candidates: list[CandidateFile] = []
        for path in paths:
            path = Path(path)
            try:
                candidates.append(CandidateFile.from_path(path))
            except OSError as exc:
                # An unreadable file is just another invalid member of the
                # batch: it is dropped and triggers the format diagnostic.
                self._logger.warning("Cannot read %s: %s", path, exc)
                candidates.append(CandidateFile(name=path.name, mime_type="", size_bytes=0, data=b""))
        return self.add_candidates(candidates)

    def add_candidates(self, candidates: Iterable[CandidateFile]) -> AdmitAssetsResponse:
        response = self._context.admit.execute(AdmitAssetsRequest(candidates=list(candidates)))

        self._set_errors(response.format_error, response.capacity_error)
        if response.success and response.message:
            self._notifications.emit(response.message, NotificationSeverity.SUCCESS)
        return response

    @Slot(int)
    def delete(self, index: int) -> bool:
        response = self._context.delete.execute(DeleteAssetRequest(index=index))
        if not response.success:
            self._notifications.emit(response.error or "Could not delete image.", NotificationSeverity.ERROR)
            return False
        previewed = self._previews.current_asset()
        if previewed is not None and response.asset is not None and previewed.id == response.asset.id:
            self._previews.dismiss()
        # Deletions use the error colour.
        self._notifications.emit(response.message, NotificationSeverity.ERROR)
        return True

    def rotate(self, index: int, direction: RotationDirection | str) -> Optional[str]:
        """Queue a quarter-turn of the asset at *index*; returns its id."""

        try:
            return self._rotations.request_at(index, direction)
        except AssetNotFoundError as exc:
            self._notifications.emit(str(exc), NotificationSeverity.ERROR)
            return None

    @Slot(int)
    def preview(self, index: int) -> Optional[QImage]:
        try:
            asset = self._context.store.get(index)
        except AssetNotFoundError as exc:
            self._notifications.emit(str(exc), NotificationSeverity.ERROR)
            return None
        return self._previews.request_preview(asset)

    @Slot()
    def dismiss_preview(self) -> None:
        self._previews.dismiss()

    # ------------------------------------------------------------------
    # Internal callbacks
    # ------------------------------------------------------------------
    def _set_errors(self, format_error: Optional[str], capacity_error: Optional[str]) -> None:
        format_error = format_error or ""
        capacity_error = capacity_error or ""
        label = format_error or capacity_error
        if format_error != self._format_error:
            self._format_error = format_error
            self.formatErrorChanged.emit(format_error)
        if capacity_error != self._capacity_error:
            self._capacity_error = capacity_error
            self.capacityErrorChanged.emit(capacity_error)
        if label != self._error:
            self._error = label
            self.errorChanged.emit(label)

    def _on_collection_changed(self, event: CollectionChangedEvent) -> None:
        self.collectionChanged.emit(self.assets())

    def _on_snapshot_save_failed(self, event: SnapshotSaveFailedEvent) -> None:
        self._notifications.emit(
            "Changes could not be saved and will be lost when the app closes.",
            NotificationSeverity.WARNING,
        )

    def _on_error_reported(self, message: str, severity: ErrorSeverity) -> None:
        self._notifications.emit(message, NotificationSeverity.ERROR)

    @Slot(object, int, str)
    def _on_rotation_committed(self, asset: ImageAsset, index: int, direction: str) -> None:
        previewed = self._previews.current_asset()
        if previewed is not None and previewed.id == asset.id:
            self._previews.request_preview(asset)
        self._notifications.emit(MSG_ROTATED.format(direction=direction), NotificationSeverity.SUCCESS)

    @Slot(str, str)
    def _on_rotation_failed(self, asset_id: str, message: str) -> None:
        self._notifications.emit(message, NotificationSeverity.ERROR)

    @Slot(str)
    def _on_preview_failed(self, message: str) -> None:
        self._notifications.emit(message, NotificationSeverity.ERROR)


__all__ = ["GalleryFacade"]
