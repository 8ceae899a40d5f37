# sitehost/storage/guarded.py
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Any, Callable, Iterator

from .base import BlobMetadata, BlobStore, StorageError

_END = object()


class GuardedBlobStore(BlobStore):
    """
    Wraps a backend so every call has a bounded running time.

    Each call runs on a worker thread. A call that does not finish within
    `timeout` seconds raises StorageError; so does any OSError raised by
    the backend. Calls are never retried here.
    """

    def __init__(self, inner: BlobStore, *, timeout: float, max_workers: int = 4):
        self.inner = inner
        self.timeout = timeout
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="blob-store",
        )

    def _call(self, op: str, fn: Callable[..., Any], *args: Any) -> Any:
        future = self._executor.submit(fn, *args)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeout:
            future.cancel()
            raise StorageError(f"Blob store {op} timed out after {self.timeout}s") from None
        except StorageError:
            raise
        except OSError as exc:
            raise StorageError(f"Blob store {op} failed: {exc}") from exc

    def store(self, data: bytes) -> str:
        return self._call("store", self.inner.store, data)

    def fetch(self, blob_id: str) -> bytes:
        return self._call("fetch", self.inner.fetch, blob_id)

    def purge(self, blob_id: str) -> None:
        self._call("purge", self.inner.purge, blob_id)

    def metadata(self, blob_id: str) -> BlobMetadata:
        return self._call("metadata", self.inner.metadata, blob_id)

    def iter_chunks(self, blob_id: str, chunk_size: int) -> Iterator[bytes]:
        chunks = self.inner.iter_chunks(blob_id, chunk_size)

        # First read happens now so a missing blob fails before streaming starts
        first = self._call("read", next, chunks, _END)

        def stream() -> Iterator[bytes]:
            chunk = first
            while chunk is not _END:
                yield chunk
                chunk = self._call("read", next, chunks, _END)

        return stream()

    def blob_ids(self) -> list[str]:
        return self._call("list", self.inner.blob_ids)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)
