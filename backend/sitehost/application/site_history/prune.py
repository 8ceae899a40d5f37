# sitehost/application/site_history/prune.py
from datetime import timedelta
from typing import Dict, List, Optional
from flask import current_app
from sitehost.extensions import db
from sitehost.models.base import utc_now
from sitehost.models.site import Site
from sitehost.models.site_version import SiteVersion
from sitehost.domain.ledger import VersionLedger
from sitehost.storage import BlobNotFoundError, get_blob_store, get_purger
from sitehost.utils.site_lock import site_lock
from sitehost.utils.transaction import transactional


def prune_site_history(*, site_id: Optional[str] = None) -> Dict[str, List[str]]:
    """
    Re-apply the keep-count to one site, or to every site.

    Needed after a keep-count is lowered, since eviction otherwise only
    happens on save. Returns evicted blob ids per site.
    """
    query = Site.query
    if site_id:
        query = query.filter_by(id=site_id)

    evicted_by_site = {}
    for site_ref in query.all():
        with site_lock(site_ref.id):
            site = db.session.get(Site, site_ref.id, populate_existing=True, with_for_update=True)
            if site is None:
                continue

            with transactional():
                evicted = VersionLedger(site).prune()

            purgeable = [b for b in evicted if b != site.current_blob_id]
            get_purger().purge_many(purgeable)

        if evicted:
            current_app.logger.info(f"Pruned {len(evicted)} versions of site {site.id}")
            evicted_by_site[site.id] = evicted

    return evicted_by_site


def purge_orphan_blobs(*, min_age: timedelta = timedelta(hours=1)) -> List[str]:
    """
    Purge stored blobs that no site or saved version refers to.

    Picks up blobs left behind by failed best-effort purges. Blobs younger
    than `min_age` are skipped, they may belong to a save in progress.
    """
    store = get_blob_store()
    cutoff = utc_now() - min_age

    referenced = {
        blob_id for (blob_id,) in db.session.query(SiteVersion.blob_id)
    }
    referenced.update(
        blob_id for (blob_id,) in db.session.query(Site.current_blob_id)
        if blob_id
    )

    orphans = []
    for blob_id in store.blob_ids():
        if blob_id in referenced:
            continue
        try:
            created_at = store.metadata(blob_id).created_at
        except BlobNotFoundError:
            # Purged since it was listed
            continue
        if created_at <= cutoff:
            orphans.append(blob_id)

    failed = get_purger().purge_many(orphans)

    purged = [b for b in orphans if b not in failed]
    current_app.logger.info(f"Purged {len(purged)} orphan blobs ({len(failed)} failed)")
    return purged
