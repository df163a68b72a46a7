from __future__ import annotations

import mimetypes
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Optional

from ..config import MIME_JPEG, MIME_PNG

# Browsers report these regardless of platform mime tables, so the lookup does
# not depend on what the host's ``mimetypes`` database happens to contain.
_EXTENSION_MIME = {
    ".png": MIME_PNG,
    ".jpg": MIME_JPEG,
    ".jpeg": MIME_JPEG,
    ".jpe": MIME_JPEG,
}


def guess_mime_type(name: str) -> str:
    """Return the mime type a file picker would report for *name*, or ``""``."""

    suffix = Path(name).suffix.lower()
    if suffix in _EXTENSION_MIME:
        return _EXTENSION_MIME[suffix]
    guessed, _ = mimetypes.guess_type(name, strict=False)
    return guessed or ""


class RotationDirection(str, Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def degrees(self) -> int:
        """Signed angle in degrees, clockwise positive."""
        return -90 if self is RotationDirection.LEFT else 90

    @classmethod
    def parse(cls, value: "RotationDirection | str") -> "RotationDirection":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown rotation direction: {value!r}") from None


@dataclass(frozen=True)
class CandidateFile:
    """A file offered for admission, as a picker or drop target hands it over."""

    name: str
    mime_type: str
    size_bytes: int
    data: bytes = field(repr=False)

    @classmethod
    def from_bytes(cls, name: str, data: bytes, mime_type: Optional[str] = None) -> CandidateFile:
        return cls(
            name=name,
            mime_type=mime_type if mime_type is not None else guess_mime_type(name),
            size_bytes=len(data),
            data=bytes(data),
        )

    @classmethod
    def from_path(cls, path: Path, mime_type: Optional[str] = None) -> CandidateFile:
        path = Path(path)
        return cls.from_bytes(path.name, path.read_bytes(), mime_type)


@dataclass(frozen=True)
class ImageAsset:
    """An admitted image.

    Assets are never mutated; a rotation builds a new instance that keeps the
    ``id`` and ``name`` of its predecessor.  ``data`` is empty for assets that
    were restored from a metadata-only snapshot.
    """

    id: str
    name: str
    mime_type: str
    size_bytes: int
    data: bytes = field(default=b"", repr=False)
    width: Optional[int] = None
    height: Optional[int] = None

    @classmethod
    def create(
        cls,
        name: str,
        mime_type: str,
        data: bytes,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> ImageAsset:
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            mime_type=mime_type,
            size_bytes=len(data),
            data=bytes(data),
            width=width,
            height=height,
        )

    @property
    def has_payload(self) -> bool:
        return bool(self.data)

    @property
    def dimensions(self) -> Optional[tuple[int, int]]:
        if self.width is None or self.height is None:
            return None
        return self.width, self.height

    def with_payload(self, data: bytes, width: int, height: int) -> ImageAsset:
        """Return a copy carrying a new payload and its pixel dimensions."""
        return replace(self, data=bytes(data), size_bytes=len(data), width=width, height=height)
