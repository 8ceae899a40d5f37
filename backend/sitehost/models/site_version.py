from sitehost.extensions import db
from .base import BaseModel

SAVE_KINDS = ("manual", "autosave", "restore")

class SiteVersion(BaseModel):
    """One saved blob in a site's history. Rows are never updated."""

    __tablename__ = "site_versions"

    site_id = db.Column(
        db.String(36),
        db.ForeignKey("sites.id"),
        nullable=False
    )

    blob_id = db.Column(db.String(64), nullable=False)
    seq = db.Column(db.Integer, nullable=False)

    byte_size = db.Column(db.Integer, nullable=False)
    content_type = db.Column(db.String(100), nullable=False, default="text/html")

    save_kind = db.Column(db.String(20), nullable=False, default="manual")
    # manual | autosave | restore
    restored_from = db.Column(db.String(64), nullable=True)

    created_by = db.Column(db.String(36), nullable=True)

    site = db.relationship("Site")

    __table_args__ = (
        db.UniqueConstraint("site_id", "blob_id", name="uq_site_version_blob"),
        db.UniqueConstraint("site_id", "seq", name="uq_site_version_seq"),
        db.Index("idx_site_version_site", "site_id"),
    )
