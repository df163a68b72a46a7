"""Admission rules for candidate files.

The gate has two parts.  Every candidate is checked on its own against the
mime whitelist and the per-file size cap.  The batch as a whole is then
checked against the remaining capacity of the collection, using the count of
*all* valid candidates: either every valid candidate fits and is admitted, or
none of them is.  A batch is never partially filled up to the limit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..config import (
    ALLOWED_MIME_TYPES,
    MAX_ASSET_BYTES,
    MAX_COLLECTION_SIZE,
    MSG_CAPACITY_EXCEEDED,
    MSG_FORMAT_REJECTED,
    MSG_UPLOADED,
)
from .models import CandidateFile


def is_admissible(candidate: CandidateFile) -> bool:
    """Return ``True`` when *candidate* passes the format and size checks."""

    return candidate.mime_type in ALLOWED_MIME_TYPES and 0 <= candidate.size_bytes <= MAX_ASSET_BYTES


@dataclass(frozen=True)
class AdmissionDecision:
    """Outcome of running a batch through the admission gate.

    ``format_error`` and ``capacity_error`` are independent; both can be set
    for the same batch.
    """

    admitted: tuple[CandidateFile, ...] = ()
    rejected: tuple[CandidateFile, ...] = ()
    format_error: Optional[str] = None
    capacity_error: Optional[str] = None
    valid_count: int = 0

    @property
    def accepted(self) -> bool:
        """``True`` unless the batch was refused for lack of capacity."""
        return self.capacity_error is None

    @property
    def success_message(self) -> Optional[str]:
        if not self.accepted:
            return None
        return MSG_UPLOADED.format(count=len(self.admitted))

    @property
    def message(self) -> Optional[str]:
        """The single line a one-slot error label shows.

        The format diagnostic is raised after the capacity check, so it wins
        when both apply.
        """
        return self.format_error or self.capacity_error

    @property
    def errors(self) -> list[str]:
        return [msg for msg in (self.capacity_error, self.format_error) if msg]


def partition(batch: Iterable[CandidateFile]) -> tuple[list[CandidateFile], list[CandidateFile]]:
    valid: list[CandidateFile] = []
    invalid: list[CandidateFile] = []
    for candidate in batch:
        (valid if is_admissible(candidate) else invalid).append(candidate)
    return valid, invalid


def evaluate_batch(
    current_count: int,
    batch: Iterable[CandidateFile],
    *,
    capacity: int = MAX_COLLECTION_SIZE,
) -> AdmissionDecision:
    """Decide which members of *batch* enter a collection holding *current_count* assets."""

    valid, invalid = partition(batch)

    capacity_error = None
    admitted: tuple[CandidateFile, ...] = ()
    if current_count + len(valid) <= capacity:
        admitted = tuple(valid)
    else:
        capacity_error = MSG_CAPACITY_EXCEEDED

    format_error = MSG_FORMAT_REJECTED if invalid else None

    return AdmissionDecision(
        admitted=admitted,
        rejected=tuple(invalid),
        format_error=format_error,
        capacity_error=capacity_error,
        valid_count=len(valid),
    )


__all__ = ["AdmissionDecision", "evaluate_batch", "is_admissible", "partition"]
