from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from photoshelf.cli import app
from photoshelf.config import MSG_CAPACITY_EXCEEDED, MSG_FORMAT_REJECTED, SNAPSHOT_KEY

runner = CliRunner()


@pytest.fixture
def images(tmp_path: Path, png_bytes):
    def _make(count: int, width: int = 40, height: int = 20) -> list[Path]:
        paths = []
        for i in range(count):
            path = tmp_path / f"img{i}.png"
            path.write_bytes(png_bytes(width, height))
            paths.append(path)
        return paths

    return _make


def _invoke(storage: Path, *args: str):
    return runner.invoke(app, ["--storage", str(storage), *args])


def test_add_and_list(storage_path: Path, images) -> None:
    paths = images(2)

    result = _invoke(storage_path, "add", *map(str, paths))

    assert result.exit_code == 0, result.output
    assert "2 images uploaded successfully." in result.output
    assert len(json.loads(storage_path.read_text(encoding="utf-8"))[SNAPSHOT_KEY]["assets"]) == 2

    listing = _invoke(storage_path, "list")
    assert listing.exit_code == 0
    assert "img0.png" in listing.output
    assert "img1.png" in listing.output


def test_list_empty_shelf(storage_path: Path) -> None:
    result = _invoke(storage_path, "list")
    assert result.exit_code == 0
    assert "empty" in result.output


def test_add_refuses_overflowing_batch(storage_path: Path, images) -> None:
    result = _invoke(storage_path, "add", *map(str, images(6)))

    assert result.exit_code == 1
    assert MSG_CAPACITY_EXCEEDED in result.output
    assert not storage_path.exists()


def test_add_reports_rejected_files(tmp_path: Path, storage_path: Path, images) -> None:
    gif = tmp_path / "anim.gif"
    gif.write_bytes(b"GIF89a")

    result = _invoke(storage_path, "add", str(images(1)[0]), str(gif), str(tmp_path / "missing.png"))

    assert result.exit_code == 0
    assert MSG_FORMAT_REJECTED in result.output
    assert "1 images uploaded successfully." in result.output


def test_rotate_updates_dimensions(storage_path: Path, images) -> None:
    _invoke(storage_path, "add", *map(str, images(1)))

    result = _invoke(storage_path, "rotate", "0", "left")

    assert result.exit_code == 0, result.output
    assert "Image rotated left." in result.output
    assert "20×40" in result.output


def test_rotate_rejects_unknown_direction(storage_path: Path, images) -> None:
    _invoke(storage_path, "add", *map(str, images(1)))

    result = _invoke(storage_path, "rotate", "0", "up")

    assert result.exit_code == 2


def test_delete_and_missing_index(storage_path: Path, images) -> None:
    _invoke(storage_path, "add", *map(str, images(3)))

    result = _invoke(storage_path, "delete", "1")
    assert result.exit_code == 0
    assert "Image deleted successfully. (img1.png)" in result.output

    missing = _invoke(storage_path, "delete", "5")
    assert missing.exit_code == 1
    assert "Error:" in missing.output


def test_export_writes_bytes(tmp_path: Path, storage_path: Path, images) -> None:
    (path,) = images(1)
    _invoke(storage_path, "add", str(path))
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    result = _invoke(storage_path, "export", "0", str(out_dir))

    assert result.exit_code == 0, result.output
    assert (out_dir / "img0.png").read_bytes() == path.read_bytes()


def test_metadata_only_storage_drops_payloads(tmp_path: Path, storage_path: Path, images) -> None:
    result = runner.invoke(
        app, ["--storage", str(storage_path), "--metadata-only", "add", *map(str, images(2))]
    )
    assert result.exit_code == 0, result.output

    listing = _invoke(storage_path, "list")
    assert "no data" in listing.output

    export = _invoke(storage_path, "export", "0", str(tmp_path / "copy.png"))
    assert export.exit_code == 1
    assert "without image data" in export.output
