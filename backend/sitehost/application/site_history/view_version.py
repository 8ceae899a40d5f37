# sitehost/application/site_history/view_version.py
from dataclasses import dataclass
from sitehost.domain.access import SiteContext, require_full_history
from sitehost.domain.ledger import VersionLedger
from sitehost.storage import get_blob_store
from sitehost.application.sites.lookup import load_site


@dataclass(frozen=True)
class VersionContent:
    blob_id: str
    content: bytes
    content_type: str


def view_version(*, ctx: SiteContext, blob_id: str) -> VersionContent:
    """
    Content of a saved version for inline display.

    Historical content is shown as stored, without any per-viewer
    personalization.
    """
    require_full_history(ctx.capabilities)

    site = load_site(ctx)
    entry = VersionLedger(site).find(blob_id)

    content = get_blob_store().fetch(entry.blob_id)

    return VersionContent(
        blob_id=entry.blob_id,
        content=content,
        content_type=entry.content_type,
    )
