import logging
from dataclasses import dataclass, field
from typing import Optional

from .base import UseCase, UseCaseRequest, UseCaseResponse
from ..collection_store import CollectionStore
from ...core.rotation import probe_dimensions
from ...domain.admission import evaluate_batch
from ...domain.models import CandidateFile, ImageAsset
from ...errors import CapacityExceededError
from ...events.bus import EventBus
from ...events.gallery_events import AssetsAdmittedEvent


@dataclass(frozen=True)
class AdmitAssetsRequest(UseCaseRequest):
    candidates: list[CandidateFile] = field(default_factory=list)


@dataclass(frozen=True)
class AdmitAssetsResponse(UseCaseResponse):
    admitted: list[ImageAsset] = field(default_factory=list)
    rejected_count: int = 0
    format_error: Optional[str] = None
    capacity_error: Optional[str] = None

    @property
    def admitted_count(self) -> int:
        return len(self.admitted)


class AdmitAssetsUseCase(UseCase):
    def __init__(self, store: CollectionStore, event_bus: EventBus):
        self._store = store
        self._event_bus = event_bus
        self._logger = logging.getLogger(__name__)

    def execute(self, request: AdmitAssetsRequest) -> AdmitAssetsResponse:
        decision = evaluate_batch(len(self._store), request.candidates, capacity=self._store.capacity)

        for candidate in decision.rejected:
            self._logger.info(
                "Rejected %s (%s, %d bytes)", candidate.name, candidate.mime_type or "unknown type", candidate.size_bytes
            )

        if not decision.accepted:
            self._logger.info(
                "Refused batch of %d valid files: collection holds %d of %d",
                decision.valid_count,
                len(self._store),
                self._store.capacity,
            )
            return AdmitAssetsResponse(
                success=False,
                error=decision.message,
                rejected_count=len(decision.rejected),
                format_error=decision.format_error,
                capacity_error=decision.capacity_error,
            )

        assets = [self._to_asset(candidate) for candidate in decision.admitted]
        try:
            self._store.insert(assets)
        except CapacityExceededError as exc:
            # Only reachable if the store was mutated between the decision and
            # the insert; report it like any other capacity refusal.
            self._logger.warning("Insert refused after admission: %s", exc)
            return AdmitAssetsResponse(
                success=False,
                error=decision.message or str(exc),
                rejected_count=len(decision.rejected),
                format_error=decision.format_error,
                capacity_error=str(exc),
            )

        if assets:
            self._event_bus.publish(AssetsAdmittedEvent(
                asset_ids=[asset.id for asset in assets],
                rejected_count=len(decision.rejected),
                source="AdmitAssetsUseCase",
            ))

        return AdmitAssetsResponse(
            success=True,
            error=decision.format_error,
            admitted=assets,
            rejected_count=len(decision.rejected),
            format_error=decision.format_error,
            message=decision.success_message,
        )

    def _to_asset(self, candidate: CandidateFile) -> ImageAsset:
        dims = probe_dimensions(candidate.data)
        if dims is None:
            # Admission is mime and size based; a payload Pillow cannot read is
            # still admitted and will fail later if someone rotates it.
            self._logger.warning("Could not read dimensions of %s", candidate.name)
            width = height = None
        else:
            width, height = dims
        return ImageAsset.create(
            name=candidate.name,
            mime_type=candidate.mime_type,
            data=candidate.data,
            width=width,
            height=height,
        )
