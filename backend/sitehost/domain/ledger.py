# sitehost/domain/ledger.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func

from sitehost.extensions import db
from sitehost.models.site import Site
from sitehost.models.site_version import SiteVersion
from sitehost.domain.invariants.exceptions import DuplicateVersionError, VersionNotFoundError


class VersionLedger:
    """
    Ordered history of saved blobs for one site.

    Entries are ordered by a per-site sequence number. The ledger only
    changes database rows (flushed, never committed) and never touches the
    blob store: callers purge the blob ids it hands back once their
    transaction is safe.
    """

    def __init__(self, site: Site):
        self.site = site

    def _query(self):
        return SiteVersion.query.filter_by(site_id=self.site.id)

    def __len__(self) -> int:
        return self._query().count()

    def __contains__(self, blob_id: str) -> bool:
        return self._query().filter_by(blob_id=blob_id).first() is not None

    def list(self) -> List[SiteVersion]:
        """Entries newest-first."""
        return self._query().order_by(SiteVersion.seq.desc()).all()

    def find(self, blob_id: str) -> SiteVersion:
        entry = self._query().filter_by(blob_id=blob_id).first()
        if entry is None:
            raise VersionNotFoundError(blob_id)
        return entry

    def append(
        self,
        blob_id: str,
        *,
        created_at: datetime,
        byte_size: int,
        content_type: str = "text/html",
        save_kind: str = "manual",
        restored_from: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> List[str]:
        """
        Append a new entry, then evict down to the keep-count.

        Returns the evicted blob ids, oldest first. With a keep-count of
        zero the new entry is evicted as well.
        """
        if blob_id in self:
            raise DuplicateVersionError(blob_id)

        entry = SiteVersion()
        entry.site_id = self.site.id
        entry.blob_id = blob_id
        entry.seq = self._next_seq()
        entry.created_at = created_at
        entry.byte_size = byte_size
        entry.content_type = content_type
        entry.save_kind = save_kind
        entry.restored_from = restored_from
        entry.created_by = created_by

        db.session.add(entry)
        db.session.flush()

        return self.prune()

    def remove(self, blob_id: str) -> SiteVersion:
        """Delete the entry. Its blob is left for the caller to purge."""
        entry = self.find(blob_id)
        db.session.delete(entry)
        db.session.flush()
        return entry

    def prune(self) -> List[str]:
        """Evict the oldest entries beyond the keep-count."""
        keep = self.site.effective_keep_count
        entries = self._query().order_by(SiteVersion.seq.asc()).all()

        excess = len(entries) - keep
        if excess <= 0:
            return []

        evicted = entries[:excess]
        for entry in evicted:
            db.session.delete(entry)
        db.session.flush()

        return [entry.blob_id for entry in evicted]

    def _next_seq(self) -> int:
        last = (
            db.session.query(func.max(SiteVersion.seq))
            .filter(SiteVersion.site_id == self.site.id)
            .scalar()
        )
        return (last or 0) + 1
