# sitehost/storage/filesystem.py
from __future__ import annotations

import os
import re
import tempfile
import uuid
from datetime import datetime, timezone
from typing import Iterator

from .base import BlobMetadata, BlobNotFoundError, BlobStore

BLOB_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


class FilesystemBlobStore(BlobStore):
    """
    Stores each blob as a file under <root>/<id[:2]>/<id>.

    Writes go to a temporary file first and are moved into place,
    so a blob is either fully present or absent.
    """

    def __init__(self, root: str):
        self.root = os.path.abspath(root)
        os.makedirs(self.root, exist_ok=True)

    def _path(self, blob_id: str) -> str:
        if not BLOB_ID_PATTERN.match(blob_id or ""):
            raise BlobNotFoundError(blob_id)
        return os.path.join(self.root, blob_id[:2], blob_id)

    def store(self, data: bytes) -> str:
        blob_id = uuid.uuid4().hex
        path = self._path(blob_id)
        os.makedirs(os.path.dirname(path), exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=os.path.dirname(path), prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_path, path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        return blob_id

    def fetch(self, blob_id: str) -> bytes:
        try:
            with open(self._path(blob_id), "rb") as fh:
                return fh.read()
        except FileNotFoundError:
            raise BlobNotFoundError(blob_id) from None

    def purge(self, blob_id: str) -> None:
        try:
            os.remove(self._path(blob_id))
        except FileNotFoundError:
            raise BlobNotFoundError(blob_id) from None

    def metadata(self, blob_id: str) -> BlobMetadata:
        try:
            st = os.stat(self._path(blob_id))
        except FileNotFoundError:
            raise BlobNotFoundError(blob_id) from None
        return BlobMetadata(
            blob_id=blob_id,
            size=st.st_size,
            created_at=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
        )

    def iter_chunks(self, blob_id: str, chunk_size: int) -> Iterator[bytes]:
        try:
            fh = open(self._path(blob_id), "rb")
        except FileNotFoundError:
            raise BlobNotFoundError(blob_id) from None

        with fh:
            while True:
                chunk = fh.read(chunk_size)
                if not chunk:
                    break
                yield chunk

    def blob_ids(self) -> list[str]:
        ids = []
        for _dirpath, _dirnames, filenames in os.walk(self.root):
            ids.extend(name for name in filenames if BLOB_ID_PATTERN.match(name))
        return ids
