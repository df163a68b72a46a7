import logging
from dataclasses import dataclass
from typing import Optional

from .base import UseCase, UseCaseRequest, UseCaseResponse
from ..collection_store import CollectionStore
from ...config import MSG_ROTATED
from ...core.rotation import rotate_asset
from ...domain.models import ImageAsset, RotationDirection
from ...errors import AssetNotFoundError, TransformError
from ...events.bus import EventBus
from ...events.gallery_events import AssetRotatedEvent


@dataclass(frozen=True)
class RotateAssetRequest(UseCaseRequest):
    index: int = 0
    direction: RotationDirection = RotationDirection.RIGHT


@dataclass(frozen=True)
class RotateAssetResponse(UseCaseResponse):
    asset: Optional[ImageAsset] = None


class RotateAssetUseCase(UseCase):
    """Rotate the asset at an index and commit the result in place.

    This is the blocking path used outside the GUI.  The GUI runs the same
    stages on a worker thread through :class:`~photoshelf.gui.rotation_queue.RotationQueue`
    and calls :meth:`commit` when the worker is done.
    """

    def __init__(self, store: CollectionStore, event_bus: EventBus):
        self._store = store
        self._event_bus = event_bus
        self._logger = logging.getLogger(__name__)

    def execute(self, request: RotateAssetRequest) -> RotateAssetResponse:
        direction = RotationDirection.parse(request.direction)
        try:
            source = self._store.get(request.index)
        except AssetNotFoundError as exc:
            return RotateAssetResponse(success=False, error=str(exc))

        try:
            rotated = rotate_asset(source, direction)
        except TransformError as exc:
            self._logger.warning("Rotation of %s failed: %s", source.name, exc)
            return RotateAssetResponse(success=False, error=str(exc))

        try:
            self.commit(rotated, direction)
        except AssetNotFoundError as exc:
            return RotateAssetResponse(success=False, error=str(exc))
        return RotateAssetResponse(
            asset=rotated,
            message=MSG_ROTATED.format(direction=direction.value),
        )

    def commit(self, rotated: ImageAsset, direction: RotationDirection) -> int:
        """Store *rotated* in place of the entry with the same id; return its index."""

        position = self._store.replace(rotated)
        self._event_bus.publish(AssetRotatedEvent(
            asset_id=rotated.id,
            index=position,
            direction=RotationDirection.parse(direction).value,
            source="RotateAssetUseCase",
        ))
        return position
