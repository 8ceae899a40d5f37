from collections import Counter
from .exceptions import InvariantViolation

def assert_ledger(site, entries):
    """`entries` is the ledger listing, newest-first."""
    blob_ids = [entry.blob_id for entry in entries]

    duplicates = [blob_id for blob_id, n in Counter(blob_ids).items() if n > 1]
    if duplicates:
        raise InvariantViolation(
            f"Duplicate blob ids in history of site {site.id}: {duplicates}"
        )

    keep = site.effective_keep_count
    if len(entries) > keep:
        raise InvariantViolation(
            f"Site {site.id} keeps {len(entries)} versions, more than its keep count {keep}"
        )

    seqs = [entry.seq for entry in entries]
    if seqs != sorted(seqs, reverse=True):
        raise InvariantViolation(f"History of site {site.id} is not ordered: {seqs}")
