import threading
import time

import pytest

from sitehost.domain.access import SiteContext
from sitehost.domain.invariants.exceptions import SiteNotFoundError
from sitehost.application.sites.lookup import locked_site
from sitehost.application.site_history.discard_version import discard_version
from sitehost.utils.site_lock import held_site_locks, site_lock


def test_same_site_is_serialized() -> None:
    events = []

    def worker(name):
        with site_lock("site-1"):
            events.append(f"{name}:start")
            time.sleep(0.05)
            events.append(f"{name}:end")

    threads = [threading.Thread(target=worker, args=(n,)) for n in ("a", "b")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    # No interleaving: every start is directly followed by its own end
    assert events[0].split(":")[0] == events[1].split(":")[0]
    assert events[2].split(":")[0] == events[3].split(":")[0]


def test_different_sites_do_not_block_each_other() -> None:
    entered = threading.Event()
    release = threading.Event()

    def hold():
        with site_lock("site-a"):
            entered.set()
            release.wait(1)

    t = threading.Thread(target=hold)
    t.start()
    entered.wait(1)

    acquired = threading.Event()

    def other():
        with site_lock("site-b"):
            acquired.set()

    t2 = threading.Thread(target=other)
    t2.start()
    assert acquired.wait(1)

    release.set()
    t.join()
    t2.join()


def test_lock_is_reentrant() -> None:
    with site_lock("site-r"):
        with site_lock("site-r"):
            pass


def test_lock_is_dropped_after_release() -> None:
    with site_lock("site-d"):
        assert held_site_locks() == 1

    assert held_site_locks() == 0


def test_waiting_thread_keeps_lock_alive() -> None:
    entered = threading.Event()
    release = threading.Event()
    order = []

    def holder():
        with site_lock("site-w"):
            entered.set()
            release.wait(1)
            order.append("holder")

    def waiter():
        with site_lock("site-w"):
            order.append("waiter")

    t1 = threading.Thread(target=holder)
    t1.start()
    entered.wait(1)
    t2 = threading.Thread(target=waiter)
    t2.start()
    time.sleep(0.05)

    assert held_site_locks() == 1
    release.set()
    t1.join()
    t2.join()

    assert order == ["holder", "waiter"]
    assert held_site_locks() == 0


def test_unknown_sites_create_no_locks(full_ctx) -> None:
    for i in range(50):
        with pytest.raises(SiteNotFoundError):
            discard_version(ctx=full_ctx(f"nope-{i}"), blob_id="x")

    assert held_site_locks() == 0


def test_unknown_site_routes_create_no_locks(client, owner, auth_headers) -> None:
    headers = auth_headers(owner)
    for i in range(10):
        resp = client.post(f"/api/v1/sites/nope-{i}/history/x/discard", headers=headers)
        assert resp.status_code == 404

    assert held_site_locks() == 0


def test_locked_site_releases_lock(make_site, tenant, owner) -> None:
    site_id, _ = make_site([b"1"])
    ctx = SiteContext(tenant_id=tenant.id, site_id=site_id, actor_id=owner.id)

    with locked_site(ctx) as site:
        assert site.id == site_id
        assert held_site_locks() == 1

    assert held_site_locks() == 0
