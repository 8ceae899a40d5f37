# sitehost/application/sites/lookup.py
from contextlib import contextmanager
from sqlalchemy import select
from sitehost.extensions import db
from sitehost.models.site import Site
from sitehost.domain.access import SiteContext
from sitehost.domain.invariants.exceptions import SiteNotFoundError
from sitehost.utils.site_lock import site_lock


def _site_query(ctx: SiteContext):
    query = select(Site).where(Site.id == ctx.site_id, Site.tenant_id == ctx.tenant_id)
    if not ctx.is_admin:
        query = query.where(Site.owner_id == ctx.actor_id)
    return query


def load_site(ctx: SiteContext) -> Site:
    """
    Fetch the site for the caller.
    Sites of other users are invisible unless the caller is a tenant admin.
    """
    site = db.session.execute(_site_query(ctx)).scalar_one_or_none()
    if not site:
        raise SiteNotFoundError(f"Site {ctx.site_id} not found")
    return site


@contextmanager
def locked_site(ctx: SiteContext):
    """
    Yield the caller's site with history mutations serialized:
    a per-site process lock plus a row-level lock on the site.

    Unknown ids are rejected before any lock is created.
    """
    load_site(ctx)

    with site_lock(ctx.site_id):
        site = (
            db.session.execute(
                _site_query(ctx)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            .scalar_one_or_none()
        )

        if not site:
            # Deleted while we waited for the lock
            db.session.rollback()
            raise SiteNotFoundError(f"Site {ctx.site_id} not found")

        try:
            yield site
        except Exception:
            # Release the row lock before the process lock
            db.session.rollback()
            raise
