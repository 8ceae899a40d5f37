# sitehost/application/sites/create_site.py
from typing import Dict, Optional
from flask import current_app
from sitehost.extensions import db
from sitehost.models.base import utc_now
from sitehost.models.site import Site
from sitehost.domain.ledger import VersionLedger
from sitehost.domain.invariants.exceptions import InvariantViolation
from sitehost.domain.invariants.ledger import assert_ledger
from sitehost.storage import get_blob_store, get_purger
from sitehost.utils.transaction import transactional
from sitehost.utils.audit import log_action


def create_site(
    *,
    tenant_id: str,
    owner_id: str,
    name: str,
    content: bytes,
    content_type: str = "text/html",
    keep_count: Optional[int] = None,
) -> Dict[str, str]:
    """
    Create a site together with its first saved version.

    The first blob is stored before the site row exists, and the row is
    inserted with its current pointer and first ledger entry in one
    transaction. A site is never visible without content.
    """
    if keep_count is not None and keep_count < 0:
        raise InvariantViolation("keep_count must be a non-negative integer")

    existing = Site.query.filter_by(tenant_id=tenant_id, name=name).first()
    if existing:
        raise InvariantViolation(f"Site name '{name}' is already taken")

    # 1️⃣ Upload first; a StorageError here creates nothing
    blob_id = get_blob_store().store(content)
    now = utc_now()

    try:
        with transactional():
            site = Site()
            site.tenant_id = tenant_id
            site.owner_id = owner_id
            site.name = name
            site.keep_count = keep_count
            site.content_type = content_type
            site.current_blob_id = blob_id
            site.blob_created_at = now
            site.save_count = 1

            db.session.add(site)
            db.session.flush()

            # 2️⃣ First history entry; a keep-count of 0 evicts it but keeps the blob as current
            ledger = VersionLedger(site)
            ledger.append(
                blob_id,
                created_at=now,
                byte_size=len(content),
                content_type=content_type,
                save_kind="manual",
                created_by=owner_id,
            )
            assert_ledger(site, ledger.list())

            log_action(
                action="site.create",
                entity_type="site",
                entity_id=site.id,
                payload={"name": name, "blob_id": blob_id},
            )
    except Exception:
        # Nothing references the new blob
        get_purger().purge_many([blob_id])
        raise

    current_app.logger.info(f"Created site {site.id} ({name}) with version {blob_id}")
    return {"site_id": site.id, "blob_id": blob_id}
