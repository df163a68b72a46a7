"""Quarter-turn rotation of image assets.

A rotation runs through three stages, each of which is a plain function so the
GUI worker can report progress between them:

``decode``
    Turn the asset's payload into a Pillow surface.
``transform``
    Allocate a target whose width and height are swapped relative to the
    source and draw the source into it rotated about the centre by -90°
    (left) or +90° (right).  For quarter turns this mapping is exact: every
    source pixel lands on exactly one target pixel, so Pillow's transpose is
    used instead of a resampling rotate.
``encode``
    Re-encode the target in the asset's original format.

:func:`rotate_asset` chains the stages and builds the replacement asset.  The
replacement keeps ``id``, ``name`` and ``mime_type``; its byte size is
whatever the encoder produces and is not checked against the admission cap.
"""

from __future__ import annotations

import logging
from enum import Enum
from io import BytesIO
from typing import Callable, Optional

from PIL import Image, UnidentifiedImageError

from ..config import JPEG_QUALITY, PIL_FORMATS
from ..domain.models import ImageAsset, RotationDirection
from ..errors import DecodeError, EncodeError

LOGGER = logging.getLogger(__name__)

# Pillow's transpose names are counter-clockwise.
_TRANSPOSE = {
    RotationDirection.LEFT: Image.Transpose.ROTATE_90,
    RotationDirection.RIGHT: Image.Transpose.ROTATE_270,
}

# Modes JPEG can store directly; anything else is flattened first.
_JPEG_MODES = {"L", "RGB", "CMYK"}


class RotationStage(str, Enum):
    DECODING = "decoding"
    TRANSFORMING = "transforming"
    ENCODING = "encoding"
    COMMITTED = "committed"
    FAILED = "failed"


StageCallback = Callable[[RotationStage], None]


def decode(asset: ImageAsset) -> Image.Image:
    """Return the decoded pixels of *asset*.

    Raises:
        DecodeError: the asset carries no payload, or Pillow cannot read it.
    """

    if not asset.has_payload:
        raise DecodeError(f"{asset.name} has no image data to rotate")
    try:
        with Image.open(BytesIO(asset.data)) as img:
            img.load()
            surface = img.copy()
            # ``copy`` keeps ``info`` but we want the ICC profile even if a
            # plugin drops it on copy.
            icc = img.info.get("icc_profile")
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"Could not decode {asset.name}: {exc}") from exc
    if icc:
        surface.info["icc_profile"] = icc
    return surface


def transform(surface: Image.Image, direction: RotationDirection) -> Image.Image:
    """Return *surface* turned a quarter in *direction*, with width and height swapped."""

    direction = RotationDirection.parse(direction)
    rotated = surface.transpose(_TRANSPOSE[direction])
    rotated.info.update(surface.info)
    return rotated


def _prepare_for_jpeg(surface: Image.Image) -> Image.Image:
    if surface.mode in _JPEG_MODES:
        return surface
    if surface.mode in ("RGBA", "LA") or (surface.mode == "P" and "transparency" in surface.info):
        # Composite over white the way a browser canvas export does for JPEG.
        rgba = surface.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return surface.convert("RGB")


def encode(surface: Image.Image, mime_type: str) -> bytes:
    """Serialise *surface* in the format named by *mime_type*.

    Raises:
        EncodeError: the mime type has no encoder, or Pillow fails to write.
    """

    fmt = PIL_FORMATS.get(mime_type)
    if fmt is None:
        raise EncodeError(f"Unsupported output type: {mime_type!r}")

    options: dict = {}
    icc = surface.info.get("icc_profile")
    if icc:
        options["icc_profile"] = icc
    if fmt == "JPEG":
        surface = _prepare_for_jpeg(surface)
        options["quality"] = JPEG_QUALITY
    elif "transparency" in surface.info:
        options["transparency"] = surface.info["transparency"]

    buffer = BytesIO()
    try:
        surface.save(buffer, format=fmt, **options)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(f"Could not encode image as {fmt}: {exc}") from exc
    return buffer.getvalue()


def rotate_asset(
    asset: ImageAsset,
    direction: RotationDirection | str,
    on_stage: Optional[StageCallback] = None,
) -> ImageAsset:
    """Return a new asset holding *asset* rotated a quarter turn in *direction*.

    ``on_stage`` is invoked as each stage starts.  The ``COMMITTED`` stage is
    reported by whoever stores the result, not here.
    """

    direction = RotationDirection.parse(direction)

    def _report(stage: RotationStage) -> None:
        if on_stage is not None:
            on_stage(stage)

    _report(RotationStage.DECODING)
    source = decode(asset)

    _report(RotationStage.TRANSFORMING)
    target = transform(source, direction)

    _report(RotationStage.ENCODING)
    payload = encode(target, asset.mime_type)

    LOGGER.debug(
        "Rotated %s %s: %sx%s -> %sx%s (%d -> %d bytes)",
        asset.name,
        direction.value,
        source.width,
        source.height,
        target.width,
        target.height,
        asset.size_bytes,
        len(payload),
    )
    return asset.with_payload(payload, target.width, target.height)


def probe_dimensions(data: bytes) -> Optional[tuple[int, int]]:
    """Return ``(width, height)`` read from the image header, or ``None``."""

    if not data:
        return None
    try:
        with Image.open(BytesIO(data)) as img:
            return img.size
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError):
        return None


__all__ = [
    "RotationStage",
    "decode",
    "encode",
    "probe_dimensions",
    "rotate_asset",
    "transform",
]
