from flask import current_app
from sitehost.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin

class Site(BaseModel, TenantMixin):
    __tablename__ = "sites"

    name = db.Column(db.String(200), nullable=False)
    owner_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)

    # Live content pointer; refers to a blob that exists while the site does
    current_blob_id = db.Column(db.String(64), nullable=True)
    blob_created_at = db.Column(db.DateTime(timezone=True), nullable=True)
    content_type = db.Column(db.String(100), nullable=False, default="text/html")

    # None means the global SITE_HISTORY_KEEP_COUNT applies
    keep_count = db.Column(db.Integer, nullable=True)

    save_count = db.Column(db.Integer, nullable=False, default=0)
    view_count = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "name", name="uq_site_name_per_tenant"),
        db.CheckConstraint("keep_count IS NULL OR keep_count >= 0", name="ck_site_keep_count"),
    )

    @property
    def effective_keep_count(self) -> int:
        if self.keep_count is not None:
            return self.keep_count
        return current_app.config["SITE_HISTORY_KEEP_COUNT"]

    @property
    def saved_version_count(self) -> int:
        from .site_version import SiteVersion
        return SiteVersion.query.filter_by(site_id=self.id).count()
