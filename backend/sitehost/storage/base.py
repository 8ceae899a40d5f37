# sitehost/storage/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator


class StorageError(Exception):
    """A blob store operation failed or timed out."""


class BlobNotFoundError(StorageError):
    def __init__(self, blob_id: str):
        super().__init__(f"Blob {blob_id} not found")
        self.blob_id = blob_id


@dataclass(frozen=True)
class BlobMetadata:
    blob_id: str
    size: int
    created_at: datetime


class BlobStore(ABC):
    """
    Storage for immutable content blobs.

    Notes:
    - store() assigns the blob id; ids are never reused
    - every method may block on I/O and may raise StorageError
    """

    @abstractmethod
    def store(self, data: bytes) -> str:
        ...

    @abstractmethod
    def fetch(self, blob_id: str) -> bytes:
        ...

    @abstractmethod
    def purge(self, blob_id: str) -> None:
        ...

    @abstractmethod
    def metadata(self, blob_id: str) -> BlobMetadata:
        ...

    @abstractmethod
    def iter_chunks(self, blob_id: str, chunk_size: int) -> Iterator[bytes]:
        ...

    @abstractmethod
    def blob_ids(self) -> list[str]:
        ...

    def exists(self, blob_id: str) -> bool:
        try:
            self.metadata(blob_id)
        except BlobNotFoundError:
            return False
        return True
