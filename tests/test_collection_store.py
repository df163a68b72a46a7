from typing import List, Sequence
from unittest.mock import MagicMock

import pytest

from photoshelf.application.collection_store import CollectionStore
from photoshelf.domain.models import ImageAsset
from photoshelf.domain.repositories import ISnapshotRepository
from photoshelf.errors import AssetNotFoundError, CapacityExceededError, SnapshotSaveError
from photoshelf.errors.handler import ErrorHandler, ErrorOccurredEvent
from photoshelf.events.gallery_events import (
    CollectionChangedEvent,
    SnapshotSavedEvent,
    SnapshotSaveFailedEvent,
)


class RecordingRepository(ISnapshotRepository):
    """In-memory repository that records every snapshot it is handed."""

    def __init__(self, initial: Sequence[ImageAsset] = (), fail: bool = False):
        self.initial = list(initial)
        self.saves: List[List[ImageAsset]] = []
        self.fail = fail

    def load(self) -> List[ImageAsset]:
        return list(self.initial)

    def save(self, assets: Sequence[ImageAsset]) -> bool:
        self.saves.append(list(assets))
        return not self.fail


def _asset(name: str) -> ImageAsset:
    return ImageAsset.create(name=name, mime_type="image/png", data=name.encode())


@pytest.fixture
def repo():
    return RecordingRepository()


@pytest.fixture
def store(repo, event_bus):
    return CollectionStore(repo, event_bus)


def test_insert_appends_in_order_and_saves_full_snapshot(store, repo):
    a, b, c = _asset("a"), _asset("b"), _asset("c")
    store.insert([a, b])
    store.insert([c])

    assert [x.name for x in store.list()] == ["a", "b", "c"]
    assert [[x.name for x in snap] for snap in repo.saves] == [["a", "b"], ["a", "b", "c"]]


def test_insert_refuses_to_exceed_capacity(store, repo):
    store.insert([_asset(str(i)) for i in range(4)])

    with pytest.raises(CapacityExceededError):
        store.insert([_asset("x"), _asset("y")])

    assert len(store) == 4
    assert len(repo.saves) == 1


def test_empty_insert_is_a_no_op(store, repo):
    assert store.insert([]) == []
    assert repo.saves == []


def test_delete_at_removes_exactly_one_and_preserves_order(store, repo):
    assets = [_asset(n) for n in "abcd"]
    store.insert(assets)

    removed = store.delete_at(1)

    assert removed is assets[1]
    assert [x.name for x in store.list()] == ["a", "c", "d"]
    assert [x.name for x in repo.saves[-1]] == ["a", "c", "d"]


@pytest.mark.parametrize("index", [-1, 3, 99])
def test_out_of_range_index_raises_without_saving(store, repo, index):
    store.insert([_asset(n) for n in "abc"])
    saves_before = len(repo.saves)

    with pytest.raises(AssetNotFoundError):
        store.delete_at(index)
    with pytest.raises(IndexError):
        store.replace_at(index, _asset("z"))

    assert len(store) == 3
    assert len(repo.saves) == saves_before


def test_replace_at_and_replace_by_id(store):
    a, b = _asset("a"), _asset("b")
    store.insert([a, b])

    newer_b = b.with_payload(b"rotated", 2, 1)
    assert store.replace(newer_b) == 1
    assert store.get(1) is newer_b

    other = _asset("other")
    previous = store.replace_at(0, other)
    assert previous is a
    assert store.index_of(a.id) == -1
    assert store.find(other.id) is other


def test_replace_of_removed_asset_raises(store):
    a = _asset("a")
    store.insert([a])
    store.delete_at(0)

    with pytest.raises(AssetNotFoundError):
        store.replace(a.with_payload(b"x", 1, 1))


def test_every_mutation_publishes_collection_changed(store, event_bus):
    reasons = []
    event_bus.subscribe(CollectionChangedEvent, lambda e: reasons.append(e.reason))
    a = _asset("a")

    store.insert([a])
    store.replace_at(0, a.with_payload(b"y", 1, 1))
    store.delete_at(0)

    assert reasons == ["insert", "replace", "delete"]


def test_save_failure_keeps_memory_state_and_is_reported(event_bus):
    repo = RecordingRepository(fail=True)
    handler = ErrorHandler(MagicMock(), event_bus)
    store = CollectionStore(repo, event_bus, handler)
    failed, errors, saved = [], [], []
    event_bus.subscribe(SnapshotSaveFailedEvent, failed.append)
    event_bus.subscribe(ErrorOccurredEvent, errors.append)
    event_bus.subscribe(SnapshotSavedEvent, saved.append)

    store.insert([_asset("a")])

    assert len(store) == 1
    assert len(failed) == 1
    assert saved == []
    assert isinstance(errors[0].error, SnapshotSaveError)


def test_repository_exception_is_treated_as_failed_save(event_bus):
    repo = MagicMock(spec=ISnapshotRepository)
    repo.save.side_effect = RuntimeError("disk gone")
    store = CollectionStore(repo, event_bus)
    failed = []
    event_bus.subscribe(SnapshotSaveFailedEvent, failed.append)

    store.insert([_asset("a")])

    assert len(store) == 1
    assert failed[0].reason == "disk gone"


def test_load_restores_and_truncates_to_capacity(event_bus):
    repo = RecordingRepository(initial=[_asset(str(i)) for i in range(7)])
    store = CollectionStore(repo, event_bus)

    restored = store.load()

    assert [a.name for a in restored] == ["0", "1", "2", "3", "4"]
    assert repo.saves == []


def test_length_never_exceeds_capacity(store):
    for i in range(5):
        store.insert([_asset(str(i))])
        assert len(store) <= store.capacity
    with pytest.raises(CapacityExceededError):
        store.insert([_asset("6")])
    assert len(store) == 5
    assert store.remaining() == 0
