# sitehost/storage/purger.py
from __future__ import annotations

from typing import Iterable, List

from flask import current_app

from .base import BlobNotFoundError, BlobStore, StorageError


class ForegroundPurger:
    """
    Purges blobs synchronously in the calling request.

    Everything that deletes blob bytes goes through a purger, so a queued
    implementation with the same two methods can replace this one.
    """

    def __init__(self, store: BlobStore):
        self.store = store

    def purge(self, blob_id: str) -> None:
        """
        Purge one blob. Raises StorageError on failure or timeout.
        A blob that is already gone counts as purged.
        """
        try:
            self.store.purge(blob_id)
        except BlobNotFoundError:
            current_app.logger.warning(f"Blob {blob_id} was already purged")

    def purge_many(self, blob_ids: Iterable[str]) -> List[str]:
        """Best-effort purge. Returns the ids that could not be purged."""
        failed = []
        for blob_id in blob_ids:
            try:
                self.purge(blob_id)
            except StorageError as e:
                current_app.logger.warning(f"Failed to purge blob {blob_id}: {e}")
                failed.append(blob_id)
        return failed
