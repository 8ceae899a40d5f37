# sitehost/storage/__init__.py
from flask import current_app

from .base import BlobMetadata, BlobNotFoundError, BlobStore, StorageError
from .filesystem import FilesystemBlobStore
from .guarded import GuardedBlobStore
from .memory import MemoryBlobStore
from .purger import ForegroundPurger

BACKENDS = {
    "filesystem": lambda app: FilesystemBlobStore(app.config["BLOB_STORE_ROOT"]),
    "memory": lambda app: MemoryBlobStore(),
}


def init_blob_store(app, backend: BlobStore | None = None) -> None:
    """
    Attach the blob store and purger to the app.

    `backend` overrides BLOB_STORE_BACKEND, mainly for tests.
    """
    if backend is None:
        name = app.config["BLOB_STORE_BACKEND"]
        if name not in BACKENDS:
            raise ValueError(f"Unknown blob store backend: {name}")
        backend = BACKENDS[name](app)

    store = GuardedBlobStore(
        backend,
        timeout=app.config["BLOB_STORE_TIMEOUT"],
        max_workers=app.config["BLOB_STORE_WORKERS"],
    )
    app.extensions["blob_store"] = store
    app.extensions["blob_purger"] = ForegroundPurger(store)


def get_blob_store() -> BlobStore:
    return current_app.extensions["blob_store"]


def get_purger() -> ForegroundPurger:
    return current_app.extensions["blob_purger"]


__all__ = [
    "BlobMetadata",
    "BlobNotFoundError",
    "BlobStore",
    "FilesystemBlobStore",
    "ForegroundPurger",
    "GuardedBlobStore",
    "MemoryBlobStore",
    "StorageError",
    "get_blob_store",
    "get_purger",
    "init_blob_store",
]
