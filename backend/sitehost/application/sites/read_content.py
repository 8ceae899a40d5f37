# sitehost/application/sites/read_content.py
from dataclasses import dataclass
from sitehost.extensions import db
from sitehost.domain.access import SiteContext
from sitehost.domain.invariants.exceptions import SiteNotFoundError
from sitehost.storage import get_blob_store
from sitehost.models.site import Site
from .lookup import load_site


@dataclass(frozen=True)
class SiteContent:
    content: bytes
    content_type: str
    blob_id: str


def read_content(*, ctx: SiteContext) -> SiteContent:
    """Fetch the current content and count the view."""
    site = load_site(ctx)
    if not site.current_blob_id:
        raise SiteNotFoundError(f"Site {site.id} has no content")

    content = get_blob_store().fetch(site.current_blob_id)

    # Atomic increment, no site lock needed for a counter
    Site.query.filter_by(id=site.id).update({Site.view_count: Site.view_count + 1})
    db.session.commit()

    return SiteContent(
        content=content,
        content_type=site.content_type,
        blob_id=site.current_blob_id,
    )
