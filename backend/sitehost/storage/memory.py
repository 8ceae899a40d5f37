# sitehost/storage/memory.py
from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from typing import Dict, Iterator, Tuple

from .base import BlobMetadata, BlobNotFoundError, BlobStore


class MemoryBlobStore(BlobStore):
    """Process-local store used for development and tests."""

    def __init__(self):
        self._blobs: Dict[str, Tuple[bytes, datetime]] = {}
        self._lock = threading.Lock()

    def store(self, data: bytes) -> str:
        blob_id = uuid.uuid4().hex
        with self._lock:
            self._blobs[blob_id] = (bytes(data), datetime.now(timezone.utc))
        return blob_id

    def _get(self, blob_id: str) -> Tuple[bytes, datetime]:
        with self._lock:
            try:
                return self._blobs[blob_id]
            except KeyError:
                raise BlobNotFoundError(blob_id) from None

    def fetch(self, blob_id: str) -> bytes:
        return self._get(blob_id)[0]

    def purge(self, blob_id: str) -> None:
        with self._lock:
            if self._blobs.pop(blob_id, None) is None:
                raise BlobNotFoundError(blob_id)

    def metadata(self, blob_id: str) -> BlobMetadata:
        data, created_at = self._get(blob_id)
        return BlobMetadata(blob_id=blob_id, size=len(data), created_at=created_at)

    def iter_chunks(self, blob_id: str, chunk_size: int) -> Iterator[bytes]:
        data = self.fetch(blob_id)
        for start in range(0, len(data), chunk_size):
            yield data[start:start + chunk_size]

    def blob_ids(self) -> list[str]:
        with self._lock:
            return list(self._blobs)
