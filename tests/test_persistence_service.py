"""Tests for chunked roster writes."""

from courtside.errors import PartialPersistenceFailure, RosterStoreError
from courtside.models import Player
from courtside.services import InMemoryRosterStore, PersistenceService, StoreResult, UpdateRecord


class FlakyStore:
    """Records every batch and fails the ones listed in ``fail_batches`` (1-based)."""

    def __init__(self, fail_batches=(), raise_on=(), error=None):
        self.batches = []
        self.fail_batches = set(fail_batches)
        self.raise_on = set(raise_on)
        self.error = error or RosterStoreError("network down")

    def batch_update(self, updates):
        self.batches.append(list(updates))
        number = len(self.batches)
        if number in self.raise_on:
            raise self.error
        if number in self.fail_batches:
            # The first row of a failing chunk made it before the error
            return StoreResult([{"id": updates[0].id}], RosterStoreError("rejected", status_code=500))
        return StoreResult([{"id": u.id} for u in updates])


def updates(count):
    return [UpdateRecord(f"u{i}", {"bench_count": 1}) for i in range(count)]


def test_chunk_sizes():
    chunks = PersistenceService.chunk(updates(60), 25)
    assert [len(c) for c in chunks] == [25, 25, 10]
    assert PersistenceService.chunk([], 25) == []


def test_write_sends_chunks_in_order():
    store = FlakyStore()
    service = PersistenceService(store)
    try:
        report = service.write(updates(51))
    finally:
        service.shutdown()

    assert report.ok
    assert report.total == 51
    assert report.applied == 51
    assert report.chunks == 3
    assert [len(b) for b in store.batches] == [25, 25, 1]
    assert store.batches[0][0].id == "u0"
    assert store.batches[2][0].id == "u50"


def test_failed_chunk_does_not_stop_later_chunks():
    store = FlakyStore(fail_batches={2})
    service = PersistenceService(store, chunk_size=10)
    try:
        report = service.write(updates(30))
    finally:
        service.shutdown()

    assert len(store.batches) == 3
    assert not report.ok
    assert report.applied == 21
    assert isinstance(report.failure, PartialPersistenceFailure)
    assert report.failure.failed_ids == [f"u{i}" for i in range(11, 20)]
    assert report.to_dict()["failed_ids"] == report.failure.failed_ids
    assert "1 chunk(s) failed" in str(report.failure)


def test_raised_store_error_is_reported():
    store = FlakyStore(raise_on={1})
    service = PersistenceService(store, chunk_size=5)
    try:
        report = service.write(updates(7))
    finally:
        service.shutdown()

    assert report.failure.failed_ids == [f"u{i}" for i in range(5)]
    assert report.failure.errors == ["network down"]
    assert report.applied == 2


def test_submit_runs_in_background():
    store = InMemoryRosterStore([Player(id="u0", name="U", skill_level=5)])
    service = PersistenceService(store)
    try:
        report = service.submit(updates(1)).result(timeout=5)
    finally:
        service.shutdown()

    assert report.ok
    assert store.list()[0].bench_count == 1


def test_unexpected_error_in_one_chunk_does_not_stop_the_rest():
    store = FlakyStore(raise_on={1}, error=ValueError("bad json"))
    service = PersistenceService(store, chunk_size=1)
    try:
        report = service.write(updates(4))
    finally:
        service.shutdown()

    assert len(store.batches) == 4
    assert report.applied == 3
    assert report.failure.failed_ids == ["u0"]
    assert report.failure.errors == ["bad json"]
