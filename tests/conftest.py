import os
import sys
from io import BytesIO
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Allow running the suite from a checkout without installing the package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Qt tests run headless.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from photoshelf.appctx import GalleryContext  # noqa: E402
from photoshelf.domain.models import CandidateFile  # noqa: E402
from photoshelf.events.bus import EventBus  # noqa: E402


def _gradient(width: int, height: int, mode: str = "RGB") -> Image.Image:
    """A raster where every pixel differs from its neighbours, so any
    misplaced pixel after a transform is detectable."""

    img = Image.new("RGB", (width, height))
    img.putdata([
        ((x * 37 + y * 3) % 256, (y * 53 + x) % 256, (x * 11 + y * 17) % 256)
        for y in range(height)
        for x in range(width)
    ])
    if mode != "RGB":
        img = img.convert(mode)
    return img


@pytest.fixture
def make_image() -> Callable[..., Image.Image]:
    return _gradient


@pytest.fixture
def png_bytes() -> Callable[..., bytes]:
    def _make(width: int = 40, height: int = 20, mode: str = "RGB") -> bytes:
        buffer = BytesIO()
        _gradient(width, height, mode).save(buffer, format="PNG")
        return buffer.getvalue()

    return _make


@pytest.fixture
def jpeg_bytes() -> Callable[..., bytes]:
    def _make(width: int = 40, height: int = 20) -> bytes:
        buffer = BytesIO()
        _gradient(width, height).save(buffer, format="JPEG", quality=95)
        return buffer.getvalue()

    return _make


@pytest.fixture
def png_candidate(png_bytes) -> Callable[..., CandidateFile]:
    counter = {"n": 0}

    def _make(width: int = 40, height: int = 20, name: str | None = None) -> CandidateFile:
        counter["n"] += 1
        return CandidateFile.from_bytes(name or f"image-{counter['n']}.png", png_bytes(width, height))

    return _make


@pytest.fixture
def storage_path(tmp_path: Path) -> Path:
    return tmp_path / "storage.json"


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def context(storage_path: Path, event_bus: EventBus) -> GalleryContext:
    return GalleryContext(storage_path=storage_path, event_bus=event_bus).load()
