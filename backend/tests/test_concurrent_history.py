import threading
from datetime import datetime, timezone

import pytest

from sitehost import create_app
from sitehost.extensions import db
from sitehost.models.site import Site
from sitehost.domain.ledger import VersionLedger
from sitehost.domain.access import SiteContext
from sitehost.application.sites.save_content import save_content
from sitehost.application.site_history.discard_version import discard_version


@pytest.fixture
def app(blob_store, tmp_path):
    """File-backed database so worker threads get their own connections."""
    app = create_app(
        "testing",
        blob_store=blob_store,
        config_overrides={
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'sitehost.db'}",
            "SQLALCHEMY_ENGINE_OPTIONS": {"connect_args": {"timeout": 30}},
        },
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
    app.extensions["blob_store"].shutdown()


def _run_together(app, *jobs):
    """Run each job on its own thread and app context, released at the same time."""
    barrier = threading.Barrier(len(jobs))
    results = [None] * len(jobs)

    def worker(i, job):
        with app.app_context():
            barrier.wait()
            try:
                results[i] = job()
            except Exception as e:
                results[i] = e

    threads = [threading.Thread(target=worker, args=(i, job)) for i, job in enumerate(jobs)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(30)
    return results


def _ledger(site_id):
    db.session.expire_all()
    return VersionLedger(db.session.get(Site, site_id)).list()


def test_concurrent_saves_append_distinct_entries(app, make_site, tenant, owner, blob_store) -> None:
    site_id, (v0,) = make_site([b"v0"], keep_count=10)
    ctx = SiteContext(tenant_id=tenant.id, site_id=site_id, actor_id=owner.id)
    blob_store.delay = 0.05

    def saves(prefix):
        return lambda: [
            save_content(ctx=ctx, content=f"{prefix}{n}".encode())["blob_id"]
            for n in range(3)
        ]

    results = _run_together(app, saves("a"), saves("b"))

    assert not [r for r in results if isinstance(r, Exception)], results
    saved = results[0] + results[1]
    entries = _ledger(site_id)
    assert sorted(e.blob_id for e in entries) == sorted([v0, *saved])
    assert [e.seq for e in reversed(entries)] == list(range(1, 8))

    site = db.session.get(Site, site_id)
    assert site.current_blob_id == entries[0].blob_id
    assert site.save_count == 7


def test_concurrent_discards_both_succeed(app, make_site, full_ctx, blob_store) -> None:
    site_id, (v1, v2, v3, v4) = make_site([b"1", b"2", b"3", b"4"], keep_count=10)
    ctx = full_ctx(site_id)
    blob_store.delay = 0.05

    results = _run_together(
        app,
        lambda: discard_version(ctx=ctx, blob_id=v1),
        lambda: discard_version(ctx=ctx, blob_id=v2),
    )

    assert results == [
        {"site_id": site_id, "blob_id": v1},
        {"site_id": site_id, "blob_id": v2},
    ]
    entries = _ledger(site_id)
    assert [e.blob_id for e in entries] == [v4, v3]
    assert [e.seq for e in entries] == [4, 3]
    assert blob_store.calls_for("purge") in ([v1, v2], [v2, v1])
    assert not blob_store.exists(v1)
    assert not blob_store.exists(v2)


def test_uploads_based_on_same_timestamp_conflict(app, make_site, owner, auth_headers, blob_store) -> None:
    site_id, (v1,) = make_site([b"v1"], keep_count=10)
    site = db.session.get(Site, site_id)
    site.blob_created_at = datetime(2020, 1, 1, tzinfo=timezone.utc)
    db.session.commit()

    headers = {
        **auth_headers(owner),
        "Content-Type": "text/html",
        "If-Unmodified-Since": "Wed, 01 Jan 2020 00:00:00 GMT",
    }
    blob_store.delay = 0.3

    def upload(content):
        def _put():
            resp = app.test_client().put(
                f"/api/v1/sites/{site_id}/content", data=content, headers=headers
            )
            return resp.status_code
        return _put

    statuses = _run_together(app, upload(b"mine"), upload(b"theirs"))

    assert sorted(statuses) == [200, 409]
    entries = _ledger(site_id)
    assert len(entries) == 2
    assert entries[1].blob_id == v1
    # Only the winning upload reached the store
    assert len(blob_store.calls_for("store")) == 2
