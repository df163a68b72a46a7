"""Custom exception hierarchy for PhotoShelf."""

from __future__ import annotations


class PhotoShelfError(Exception):
    """Base class for all custom errors raised by PhotoShelf."""


# --- 3-layer hierarchy ---

class DomainError(PhotoShelfError):
    """Base class for domain-level errors."""


class InfrastructureError(PhotoShelfError):
    """Base class for infrastructure-level errors."""


class ApplicationError(PhotoShelfError):
    """Base class for application-level errors."""


# --- Domain errors ---

class AssetNotFoundError(DomainError, IndexError):
    """Raised when no asset exists at the requested position or id."""


class AdmissionError(DomainError):
    """Base class for candidates refused by the admission rules."""


class CapacityExceededError(AdmissionError):
    """Raised when admitting a batch would overflow the collection."""


# --- Application errors ---

class TransformError(ApplicationError):
    """Raised when a rotation cannot be completed; the asset is left unchanged."""


class DecodeError(TransformError):
    """Raised when an asset's payload cannot be decoded into pixels."""


class EncodeError(TransformError):
    """Raised when a rotated surface cannot be re-encoded."""


# --- Infrastructure errors ---

class PersistenceError(InfrastructureError):
    """Base class for durable storage failures."""


class SnapshotLoadError(PersistenceError):
    """Raised when the stored snapshot cannot be read or parsed."""


class SnapshotSaveError(PersistenceError):
    """Raised when the snapshot cannot be written."""
