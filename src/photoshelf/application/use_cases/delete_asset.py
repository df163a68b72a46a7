from dataclasses import dataclass
from typing import Optional

from .base import UseCase, UseCaseRequest, UseCaseResponse
from ..collection_store import CollectionStore
from ...config import MSG_DELETED
from ...domain.models import ImageAsset
from ...errors import AssetNotFoundError
from ...events.bus import EventBus
from ...events.gallery_events import AssetDeletedEvent


@dataclass(frozen=True)
class DeleteAssetRequest(UseCaseRequest):
    index: int = 0


@dataclass(frozen=True)
class DeleteAssetResponse(UseCaseResponse):
    asset: Optional[ImageAsset] = None


class DeleteAssetUseCase(UseCase):
    def __init__(self, store: CollectionStore, event_bus: EventBus):
        self._store = store
        self._event_bus = event_bus

    def execute(self, request: DeleteAssetRequest) -> DeleteAssetResponse:
        try:
            removed = self._store.delete_at(request.index)
        except AssetNotFoundError as exc:
            return DeleteAssetResponse(success=False, error=str(exc))

        self._event_bus.publish(AssetDeletedEvent(
            asset_id=removed.id,
            index=request.index,
            source="DeleteAssetUseCase",
        ))
        return DeleteAssetResponse(asset=removed, message=MSG_DELETED)
