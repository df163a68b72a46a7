from __future__ import annotations

from io import BytesIO

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for rotation queue tests", exc_type=ImportError)
pytest.importorskip("pytestqt", reason="pytest-qt is required for rotation queue tests", exc_type=ImportError)

import numpy as np
from PIL import Image
from PySide6.QtCore import QThreadPool

from photoshelf.application.use_cases import AdmitAssetsRequest
from photoshelf.domain.models import ImageAsset
from photoshelf.gui.rotation_queue import RotationQueue


class ManualPool:
    """Stands in for QThreadPool; runs workers only when told to, on this thread."""

    def __init__(self) -> None:
        self.jobs = []

    def start(self, runnable) -> None:
        self.jobs.append(runnable)

    def run_next(self) -> None:
        self.jobs.pop(0).run()


def _pixels(asset: ImageAsset) -> np.ndarray:
    with Image.open(BytesIO(asset.data)) as img:
        return np.asarray(img.convert("RGB"))


@pytest.fixture
def pool() -> ManualPool:
    return ManualPool()


@pytest.fixture
def queue(qtbot, context, pool) -> RotationQueue:
    return RotationQueue(context.store, context.rotate, thread_pool=pool)


@pytest.fixture
def recorder(queue):
    events = {"committed": [], "failed": [], "stages": [], "idle": 0}
    queue.rotationCommitted.connect(lambda asset, index, direction: events["committed"].append((asset, index, direction)))
    queue.rotationFailed.connect(lambda asset_id, message: events["failed"].append((asset_id, message)))
    queue.stageChanged.connect(lambda asset_id, stage: events["stages"].append(stage))

    def _idle():
        events["idle"] += 1

    queue.idle.connect(_idle)
    return events


def _admit(context, png_candidate, *sizes):
    context.admit.execute(AdmitAssetsRequest(candidates=[png_candidate(w, h) for w, h in sizes]))
    return context.store.list()


def test_single_rotation_commits_in_place(context, png_candidate, queue, pool, recorder) -> None:
    (original,) = _admit(context, png_candidate, (40, 20))

    asset_id = queue.request_at(0, "left")

    assert asset_id == original.id
    assert queue.is_busy(original.id)
    pool.run_next()

    rotated = context.store.get(0)
    assert rotated.id == original.id
    assert rotated.dimensions == (20, 40)
    assert recorder["committed"][0][1:] == (0, "left")
    assert recorder["stages"] == ["decoding", "transforming", "encoding", "committed"]
    assert recorder["idle"] == 1
    assert not queue.is_busy()


def test_rotations_of_one_asset_run_one_at_a_time_in_request_order(
    context, png_candidate, queue, pool, recorder
) -> None:
    (original,) = _admit(context, png_candidate, (12, 6))

    queue.request_at(0, "left")
    queue.request_at(0, "right")
    queue.request_at(0, "right")

    assert len(pool.jobs) == 1
    assert queue.pending_count(original.id) == 2

    pool.run_next()
    # The next job starts from the committed result of the first.
    assert pool.jobs[0].job.asset.dimensions == (6, 12)
    pool.run_next()
    pool.run_next()

    assert [direction for _, _, direction in recorder["committed"]] == ["left", "right", "right"]
    final = context.store.get(0)
    assert final.dimensions == (6, 12)
    assert np.array_equal(_pixels(final), np.rot90(_pixels(original), k=-1))
    assert recorder["idle"] == 1


def test_different_assets_rotate_independently(context, png_candidate, queue, pool) -> None:
    first, second = _admit(context, png_candidate, (10, 4), (8, 2))

    queue.request(first.id, "left")
    queue.request(second.id, "right")

    assert len(pool.jobs) == 2
    assert queue.is_busy(first.id) and queue.is_busy(second.id)


def test_commit_follows_the_asset_when_a_neighbour_is_deleted(
    context, png_candidate, queue, pool, recorder
) -> None:
    assets = _admit(context, png_candidate, (10, 4), (10, 4), (10, 4))
    target = assets[2]

    queue.request_at(2, "right")
    context.store.delete_at(0)
    pool.run_next()

    assert context.store.index_of(target.id) == 1
    assert context.store.get(1).dimensions == (4, 10)
    assert context.store.get(0) is assets[1]
    assert recorder["committed"][0][1] == 1


def test_result_is_dropped_when_the_asset_is_deleted(context, png_candidate, queue, pool, recorder) -> None:
    (target, survivor) = _admit(context, png_candidate, (10, 4), (9, 3))

    queue.request_at(0, "left")
    queue.request_at(0, "left")
    context.store.delete_at(0)
    pool.run_next()

    assert context.store.list() == [survivor]
    assert recorder["committed"] == []
    # One report for the discarded result, one for the queued request.
    assert [asset_id for asset_id, _ in recorder["failed"]] == [target.id, target.id]
    assert pool.jobs == []
    assert queue.pending_count(target.id) == 0
    assert recorder["idle"] == 1


def test_transform_failure_leaves_asset_untouched(context, queue, pool, recorder) -> None:
    placeholder = ImageAsset(id="meta-1", name="ghost.png", mime_type="image/png", size_bytes=42)
    context.store.insert([placeholder])

    queue.request("meta-1", "right")
    pool.run_next()

    assert context.store.get(0) is placeholder
    assert recorder["failed"][0][0] == "meta-1"
    assert recorder["stages"][-1] == "failed"
    assert recorder["idle"] == 1


def test_request_for_unknown_index_raises(context, queue) -> None:
    with pytest.raises(IndexError):
        queue.request_at(0, "left")


def test_rotation_on_real_thread_pool(qtbot, context, png_candidate) -> None:
    _admit(context, png_candidate, (30, 10))
    pool = QThreadPool()
    queue = RotationQueue(context.store, context.rotate, thread_pool=pool)

    with qtbot.waitSignal(queue.idle, timeout=10000):
        queue.request_at(0, "right")
        queue.request_at(0, "right")

    assert context.store.get(0).dimensions == (30, 10)
    pool.waitForDone()
