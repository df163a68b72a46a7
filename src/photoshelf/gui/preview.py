"""Full-size preview slot."""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Optional

from PIL import Image, UnidentifiedImageError
from PySide6.QtCore import QObject, Signal, Slot
from PySide6.QtGui import QImage

from ..domain.models import ImageAsset
from ..errors import DecodeError

_LOGGER = logging.getLogger(__name__)


def qimage_from_bytes(data: bytes) -> Optional[QImage]:
    """Return a :class:`QImage` decoded from PNG/JPEG *data*, or ``None``."""

    if not data:
        return None
    image = QImage()
    if image.loadFromData(data):
        return image
    # Qt builds without the JPEG plugin still get a preview through Pillow.
    try:
        with Image.open(BytesIO(data)) as img:
            rgba = img.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError):
        _LOGGER.exception("Pillow failed to decode image bytes for preview")
        return None
    raw = rgba.tobytes("raw", "RGBA")
    qimage = QImage(raw, rgba.width, rgba.height, rgba.width * 4, QImage.Format.Format_RGBA8888)
    # ``raw`` is only borrowed by the constructor above.
    return qimage.copy()


class PreviewController(QObject):
    """Hold the single image shown in the preview dialog.

    ``previewChanged`` carries the decoded :class:`QImage`, or ``None`` once
    the slot is cleared.
    """

    previewChanged = Signal(object)
    previewFailed = Signal(str)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._asset: Optional[ImageAsset] = None
        self._image: Optional[QImage] = None

    def current(self) -> Optional[QImage]:
        return self._image

    def current_asset(self) -> Optional[ImageAsset]:
        return self._asset

    def request_preview(self, asset: ImageAsset) -> Optional[QImage]:
        """Decode *asset* into the preview slot, replacing any previous preview.

        When the asset cannot be decoded the slot is cleared and
        ``previewFailed`` is emitted.
        """

        image = qimage_from_bytes(asset.data)
        if image is None or image.isNull():
            if asset.has_payload:
                error = DecodeError(f"Could not open {asset.name} for preview")
            else:
                error = DecodeError(f"{asset.name} has no image data (restored without payload)")
            self.dismiss()
            self.previewFailed.emit(str(error))
            return None
        self._asset = asset
        self._image = image
        self.previewChanged.emit(image)
        return image

    @Slot()
    def dismiss(self) -> None:
        if self._image is None and self._asset is None:
            return
        self._asset = None
        self._image = None
        self.previewChanged.emit(None)


__all__ = ["PreviewController", "qimage_from_bytes"]
