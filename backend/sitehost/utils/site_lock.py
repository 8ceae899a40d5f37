import threading
from contextlib import contextmanager

_registry_lock = threading.Lock()

# site_id -> [RLock, number of threads holding or waiting for it]
_site_locks = {}


def _acquire_entry(site_id):
    with _registry_lock:
        entry = _site_locks.get(site_id)
        if entry is None:
            entry = _site_locks[site_id] = [threading.RLock(), 0]
        entry[1] += 1
        return entry


def _release_entry(site_id, entry):
    with _registry_lock:
        entry[1] -= 1
        if entry[1] == 0:
            del _site_locks[site_id]


def held_site_locks():
    """Number of sites with a lock currently held or awaited."""
    with _registry_lock:
        return len(_site_locks)


@contextmanager
def site_lock(site_id):
    """
    Serializes history mutations of one site within this process.
    Pair with a row-level lock for multi-process deployments.

    Locks only live while a thread holds or waits for them.
    """
    entry = _acquire_entry(site_id)
    try:
        with entry[0]:
            yield
    finally:
        _release_entry(site_id, entry)
