# sitehost/application/sites/save_content.py
from datetime import datetime
from typing import Dict, Optional
from flask import current_app
from sitehost.models.base import utc_now
from sitehost.models.site import Site
from sitehost.domain.access import SiteContext
from sitehost.domain.ledger import VersionLedger
from sitehost.domain.invariants.ledger import assert_ledger
from sitehost.storage import get_blob_store, get_purger
from sitehost.utils.transaction import transactional
from sitehost.utils.audit import log_action
from sitehost.utils.optimistic_lock import enforce_optimistic_lock
from .lookup import locked_site


def store_new_version(
    site: Site,
    *,
    ctx: SiteContext,
    content: bytes,
    content_type: str,
    save_kind: str,
    restored_from: Optional[str] = None,
) -> Dict[str, object]:
    """
    Store `content` as the site's new current blob and record it in history.

    The caller must hold the site lock.

    Responsibilities:
    - Blob upload before any database change
    - Ledger append with keep-count eviction
    - Current pointer and save counters
    - Purge of blobs that are no longer referenced
    """
    purger = get_purger()

    # 1️⃣ Upload first; a StorageError here leaves the site untouched
    blob_id = get_blob_store().store(content)
    previous_blob_id = site.current_blob_id
    now = utc_now()

    try:
        with transactional():
            ledger = VersionLedger(site)

            # 2️⃣ Append to history, evicting the oldest entries
            evicted = ledger.append(
                blob_id,
                created_at=now,
                byte_size=len(content),
                content_type=content_type,
                save_kind=save_kind,
                restored_from=restored_from,
                created_by=ctx.actor_id,
            )

            # 3️⃣ Move the current pointer
            site.current_blob_id = blob_id
            site.blob_created_at = now
            site.content_type = content_type
            if save_kind != "autosave":
                site.save_count = (site.save_count or 0) + 1

            assert_ledger(site, ledger.list())

            # The previous current blob may have been kept only because it was current
            unreferenced = list(evicted)
            if previous_blob_id and previous_blob_id not in ledger:
                unreferenced.append(previous_blob_id)
            unreferenced = [b for b in dict.fromkeys(unreferenced) if b != blob_id]

            log_action(
                action="site.content.save",
                entity_type="site",
                entity_id=site.id,
                payload={
                    "blob_id": blob_id,
                    "save_kind": save_kind,
                    "restored_from": restored_from,
                    "evicted": evicted,
                },
            )
    except Exception:
        # Nothing references the new blob
        purger.purge_many([blob_id])
        raise

    # 4️⃣ Purge outside the transaction; leftovers are swept by purge-orphans
    failed = purger.purge_many(unreferenced)

    current_app.logger.info(
        f"Saved version {blob_id} of site {site.id} ({save_kind}, {len(content)} bytes, "
        f"{len(unreferenced) - len(failed)} purged)"
    )

    return {
        "site_id": site.id,
        "blob_id": blob_id,
        "evicted": evicted,
    }


def save_content(
    *,
    ctx: SiteContext,
    content: bytes,
    content_type: str = "text/html",
    autosave: bool = False,
    unmodified_since: Optional[datetime] = None,
) -> Dict[str, object]:
    """
    Upload new content for a site.

    Autosaves are kept in history like any other save but do not
    count towards the site's save_count. With `unmodified_since` the save
    is refused with StaleContentError if the current content is newer.
    """
    with locked_site(ctx) as site:
        enforce_optimistic_lock(site.blob_created_at, unmodified_since)

        return store_new_version(
            site,
            ctx=ctx,
            content=content,
            content_type=content_type,
            save_kind="autosave" if autosave else "manual",
        )
