import threading
import time

import pytest
from flask_jwt_extended import create_access_token

from sitehost import create_app
from sitehost.extensions import db
from sitehost.models.tenant import Tenant
from sitehost.models.user import User
from sitehost.domain.access import Capability, CapabilitySet, SiteContext
from sitehost.application.sites.create_site import create_site
from sitehost.application.sites.save_content import save_content
from sitehost.storage import MemoryBlobStore, StorageError


class FlakyBlobStore(MemoryBlobStore):
    """Memory store that records calls and fails or stalls on demand."""

    def __init__(self):
        super().__init__()
        self.calls = []
        self.fail_on = set()
        self.delay = 0.0
        self._calls_lock = threading.Lock()

    def _enter(self, op, blob_id=None):
        with self._calls_lock:
            self.calls.append((op, blob_id))
        if self.delay:
            time.sleep(self.delay)
        if op in self.fail_on:
            raise StorageError(f"injected {op} failure")

    def calls_for(self, op):
        return [blob_id for name, blob_id in self.calls if name == op]

    def store(self, data):
        self._enter("store")
        return super().store(data)

    def fetch(self, blob_id):
        self._enter("fetch", blob_id)
        return super().fetch(blob_id)

    def purge(self, blob_id):
        self._enter("purge", blob_id)
        super().purge(blob_id)

    def iter_chunks(self, blob_id, chunk_size):
        self._enter("iter_chunks", blob_id)
        return super().iter_chunks(blob_id, chunk_size)


@pytest.fixture
def blob_store():
    return FlakyBlobStore()


@pytest.fixture
def app(blob_store):
    app = create_app("testing", blob_store=blob_store)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
    app.extensions["blob_store"].shutdown()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def tenant(app):
    tenant = Tenant(name="Acme", slug="acme", enable_site_history=True)
    db.session.add(tenant)
    db.session.commit()
    return tenant


def _user(tenant, email, role="user", features=None):
    user = User(email=email, role=role, tenant_id=tenant.id, features=features or {})
    user.set_password("secret")
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def owner(tenant):
    return _user(tenant, "owner@acme.test")


@pytest.fixture
def other_user(tenant):
    return _user(tenant, "other@acme.test")


@pytest.fixture
def admin(tenant):
    return _user(tenant, "admin@acme.test", role="admin")


@pytest.fixture
def preview_user(tenant):
    return _user(
        tenant,
        "preview@acme.test",
        features={"site_history": False, "site_history_preview": True},
    )


@pytest.fixture
def auth_headers(tenant):
    def _headers(user):
        token = create_access_token(
            identity=user.id,
            additional_claims={"tenant_id": user.tenant_id, "role": user.role},
        )
        return {
            "Authorization": f"Bearer {token}",
            "X-Tenant-ID": tenant.id,
        }
    return _headers


@pytest.fixture
def make_site(tenant, owner):
    """Create a site whose history holds `contents`, oldest first."""
    def _make(contents, name="notes", keep_count=None, user=None):
        user = user or owner
        first, *rest = contents
        result = create_site(
            tenant_id=tenant.id,
            owner_id=user.id,
            name=name,
            content=first,
            keep_count=keep_count,
        )
        blob_ids = [result["blob_id"]]
        ctx = SiteContext(tenant_id=tenant.id, site_id=result["site_id"], actor_id=user.id)
        for content in rest:
            blob_ids.append(save_content(ctx=ctx, content=content)["blob_id"])
        return result["site_id"], blob_ids
    return _make


@pytest.fixture
def full_ctx(tenant, owner):
    def _ctx(site_id, *capabilities):
        caps = CapabilitySet.of(*(capabilities or (Capability.SITE_HISTORY,)))
        return SiteContext(
            tenant_id=tenant.id,
            site_id=site_id,
            capabilities=caps,
            actor_id=owner.id,
        )
    return _ctx
