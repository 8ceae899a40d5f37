import time

import pytest

from sitehost.storage import (
    BlobNotFoundError,
    FilesystemBlobStore,
    ForegroundPurger,
    GuardedBlobStore,
    MemoryBlobStore,
    StorageError,
)


@pytest.fixture(params=["memory", "filesystem"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryBlobStore()
    return FilesystemBlobStore(str(tmp_path / "blobs"))


def test_store_fetch_metadata(store) -> None:
    blob_id = store.store(b"hello world")

    assert store.fetch(blob_id) == b"hello world"
    meta = store.metadata(blob_id)
    assert meta.size == 11
    assert meta.created_at.tzinfo is not None
    assert blob_id in store.blob_ids()


def test_same_content_gets_distinct_ids(store) -> None:
    assert store.store(b"same") != store.store(b"same")


def test_iter_chunks(store) -> None:
    blob_id = store.store(b"abcdefghij")
    assert list(store.iter_chunks(blob_id, 4)) == [b"abcd", b"efgh", b"ij"]


def test_purge_removes_blob(store) -> None:
    blob_id = store.store(b"bye")
    store.purge(blob_id)

    assert not store.exists(blob_id)
    with pytest.raises(BlobNotFoundError):
        store.fetch(blob_id)
    with pytest.raises(BlobNotFoundError):
        store.purge(blob_id)


def test_unknown_ids_are_not_found(store) -> None:
    with pytest.raises(BlobNotFoundError):
        store.metadata("0" * 32)


def test_filesystem_rejects_path_like_ids(tmp_path) -> None:
    store = FilesystemBlobStore(str(tmp_path))
    with pytest.raises(BlobNotFoundError):
        store.fetch("../../etc/passwd")


class SlowStore(MemoryBlobStore):
    def purge(self, blob_id):
        time.sleep(0.3)
        super().purge(blob_id)


class BrokenStore(MemoryBlobStore):
    def fetch(self, blob_id):
        raise ConnectionResetError("peer went away")


def test_guarded_store_times_out() -> None:
    guarded = GuardedBlobStore(SlowStore(), timeout=0.05)
    blob_id = guarded.store(b"x")

    with pytest.raises(StorageError, match="timed out"):
        guarded.purge(blob_id)
    guarded.shutdown()


def test_guarded_store_wraps_os_errors() -> None:
    guarded = GuardedBlobStore(BrokenStore(), timeout=1)
    with pytest.raises(StorageError, match="fetch failed"):
        guarded.fetch("a" * 32)
    guarded.shutdown()


def test_guarded_stream_fails_before_first_chunk() -> None:
    guarded = GuardedBlobStore(MemoryBlobStore(), timeout=1)
    with pytest.raises(BlobNotFoundError):
        guarded.iter_chunks("a" * 32, 8)
    guarded.shutdown()


def test_guarded_stream_yields_all_chunks() -> None:
    inner = MemoryBlobStore()
    guarded = GuardedBlobStore(inner, timeout=1)
    blob_id = inner.store(b"123456789")

    assert b"".join(guarded.iter_chunks(blob_id, 2)) == b"123456789"
    guarded.shutdown()


def test_purger_treats_missing_blob_as_purged(app) -> None:
    purger = ForegroundPurger(MemoryBlobStore())
    purger.purge("a" * 32)


def test_purge_many_reports_failures(app) -> None:
    inner = SlowStore()
    guarded = GuardedBlobStore(inner, timeout=0.05)
    ok = inner.store(b"ok")

    failed = ForegroundPurger(guarded).purge_many([ok])

    assert failed == [ok]
    guarded.shutdown()
