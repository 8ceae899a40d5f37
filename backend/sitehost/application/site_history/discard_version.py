# sitehost/application/site_history/discard_version.py
from typing import Dict
from flask import current_app
from sitehost.domain.access import SiteContext, require_full_history
from sitehost.domain.ledger import VersionLedger
from sitehost.domain.invariants.exceptions import CurrentVersionError
from sitehost.storage import get_purger
from sitehost.utils.transaction import transactional
from sitehost.utils.audit import log_action
from sitehost.application.sites.lookup import locked_site


def discard_version(*, ctx: SiteContext, blob_id: str) -> Dict[str, str]:
    """
    Permanently delete a saved version.

    The ledger row is removed inside the transaction and the blob is
    purged before commit. If the purge fails or times out the transaction
    rolls back and the version stays in history.
    """
    require_full_history(ctx.capabilities)

    with locked_site(ctx) as site:
        ledger = VersionLedger(site)
        ledger.find(blob_id)

        if blob_id == site.current_blob_id:
            raise CurrentVersionError("The current version of a site cannot be discarded")

        try:
            with transactional():
                ledger.remove(blob_id)
                get_purger().purge(blob_id)

                log_action(
                    action="site.version.discard",
                    entity_type="site",
                    entity_id=site.id,
                    payload={"blob_id": blob_id},
                )
        except Exception as e:
            current_app.logger.error(f"Discarding version {blob_id} of site {site.id} failed: {e}")
            raise

    current_app.logger.info(f"Discarded version {blob_id} of site {ctx.site_id}")
    return {"site_id": ctx.site_id, "blob_id": blob_id}
