from .admission import AdmissionDecision, evaluate_batch, is_admissible
from .models import CandidateFile, ImageAsset, RotationDirection, guess_mime_type
from .repositories import ISnapshotRepository

__all__ = [
    "AdmissionDecision",
    "CandidateFile",
    "ISnapshotRepository",
    "ImageAsset",
    "RotationDirection",
    "evaluate_batch",
    "guess_mime_type",
    "is_admissible",
]
