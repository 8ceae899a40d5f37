# sitehost/application/site_history/restore_version.py
from typing import Dict
from flask import current_app
from sitehost.domain.access import SiteContext, require_full_history
from sitehost.domain.ledger import VersionLedger
from sitehost.storage import get_blob_store
from sitehost.application.sites.lookup import locked_site
from sitehost.application.sites.save_content import store_new_version


def restore_version(*, ctx: SiteContext, blob_id: str) -> Dict[str, object]:
    """
    Make a saved version the site's current content.

    Restoring is a normal save: the content is stored as a new blob and
    appended to history, which may evict the oldest entries.
    """
    require_full_history(ctx.capabilities)

    with locked_site(ctx) as site:
        entry = VersionLedger(site).find(blob_id)
        content_type = entry.content_type

        content = get_blob_store().fetch(blob_id)

        result = store_new_version(
            site,
            ctx=ctx,
            content=content,
            content_type=content_type,
            save_kind="restore",
            restored_from=blob_id,
        )

    current_app.logger.info(f"Restored version {blob_id} of site {ctx.site_id} as {result['blob_id']}")

    return result
