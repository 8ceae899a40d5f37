# sitehost/application/site_history/history.py
from dataclasses import dataclass
from typing import List, Optional
from sitehost.models.site_version import SiteVersion
from sitehost.domain.access import SiteContext, require_history_visible
from sitehost.domain.ledger import VersionLedger
from sitehost.application.sites.lookup import load_site


@dataclass(frozen=True)
class SiteHistory:
    site_id: str
    site_name: str
    current_blob_id: Optional[str]
    saved_version_count: int
    keep_count: int
    versions: List[SiteVersion]


def get_history(*, ctx: SiteContext) -> SiteHistory:
    """
    Read-only summary of a site's saved versions, newest first.
    Preview capability is enough.
    """
    require_history_visible(ctx.capabilities)

    site = load_site(ctx)
    versions = VersionLedger(site).list()

    return SiteHistory(
        site_id=site.id,
        site_name=site.name,
        current_blob_id=site.current_blob_id,
        saved_version_count=len(versions),
        keep_count=site.effective_keep_count,
        versions=versions,
    )
