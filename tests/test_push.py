import asyncio
import time
import types

import pytest
from pywebpush import WebPushException

from conftest import TestSession, order_body, run_db
from foodfantasy.config import settings
from foodfantasy.crud import subscription as subscription_crud
from foodfantasy.services import push


def subscription_for(endpoint):
    return {"endpoint": endpoint, "keys": {"p256dh": "BNc-p256dh", "auth": "auth-secret"}}


class FakePushService:
    """Stands in for pywebpush; endpoints listed in `gone` answer 410."""

    def __init__(self, gone=()):
        self.gone = set(gone)
        self.sent = []

    def __call__(self, subscription_info, data, vapid_private_key, vapid_claims):
        endpoint = subscription_info["endpoint"]
        if endpoint in self.gone:
            raise WebPushException("Push failed: 410 Gone", response=types.SimpleNamespace(status_code=410))
        self.sent.append((endpoint, data))


@pytest.fixture
def vapid(monkeypatch):
    monkeypatch.setattr(settings, "vapid_public_key", "BPublicKey")
    monkeypatch.setattr(settings, "vapid_private_key", "private-key")


def subscribe(client, email, endpoint):
    res = client.post("/api/push/subscribe", json={"userEmail": email, "subscription": subscription_for(endpoint)})
    assert res.status_code == 201, res.text


def stored_endpoints():
    async def fetch(session):
        return sorted(s.subscription["endpoint"] for s in await subscription_crud.get_subscriptions(session))
    return run_db(fetch)


def test_payload_defaults():
    payload = push.build_payload("Hi", "There")

    assert payload == {
        "title": "Hi",
        "body": "There",
        "icon": "/favicon.ico",
        "badge": "/favicon.ico",
        "tag": "default",
        "data": {},
        "actions": [],
        "requireInteraction": False,
    }


def test_vapid_key_unavailable_without_config(client):
    res = client.get("/api/push/vapid-key")

    assert res.status_code == 503
    assert res.json()["code"] == "PUSH_NOT_CONFIGURED"


def test_vapid_key_is_served(client, vapid):
    res = client.get("/api/push/vapid-key")

    assert res.json()["data"] == {"publicKey": "BPublicKey"}


def test_resubscribing_replaces_endpoint(client):
    subscribe(client, "guest@example.com", "https://push.test/old")
    subscribe(client, "Guest@example.com", "https://push.test/new")

    assert stored_endpoints() == ["https://push.test/new"]


def test_unsubscribe_removes_subscription(client):
    subscribe(client, "guest@example.com", "https://push.test/a")

    res = client.post("/api/push/unsubscribe", json={"userEmail": "guest@example.com"})

    assert res.json()["data"] == {"removed": 1}
    assert stored_endpoints() == []


def test_send_requires_admin(client, vapid):
    res = client.post("/api/push/send", json={"userEmail": "guest@example.com", "title": "t", "body": "b"})

    assert res.status_code == 403


def test_send_to_user_delivers_payload(client, admins, vapid, monkeypatch):
    fake = FakePushService()
    monkeypatch.setattr(push, "webpush", fake)
    subscribe(client, "guest@example.com", "https://push.test/a")

    res = client.post(
        "/api/push/send",
        json={"userEmail": "guest@example.com", "title": "Table ready", "body": "Come on in", "tag": "table"},
        headers=admins["admin"],
    )

    assert res.status_code == 200, res.text
    assert res.json()["data"]["sent"] == 1
    endpoint, data = fake.sent[0]
    assert endpoint == "https://push.test/a"
    assert '"tag": "table"' in data


def test_expired_subscription_is_deleted(client, admins, vapid, monkeypatch):
    monkeypatch.setattr(push, "webpush", FakePushService(gone={"https://push.test/a"}))
    subscribe(client, "guest@example.com", "https://push.test/a")

    res = client.post(
        "/api/push/send",
        json={"userEmail": "guest@example.com", "title": "t", "body": "b"},
        headers=admins["admin"],
    )

    assert res.status_code == 410
    assert res.json()["code"] == "SUBSCRIPTION_EXPIRED"
    assert stored_endpoints() == []


def test_send_to_unsubscribed_user_is_404(client, admins, vapid):
    res = client.post(
        "/api/push/send",
        json={"userEmail": "nobody@example.com", "title": "t", "body": "b"},
        headers=admins["admin"],
    )

    assert res.status_code == 404


def test_broadcast_counts_and_prunes(client, admins, vapid, monkeypatch):
    fake = FakePushService(gone={"https://push.test/gone"})
    monkeypatch.setattr(push, "webpush", fake)
    subscribe(client, "a@example.com", "https://push.test/ok")
    subscribe(client, "b@example.com", "https://push.test/gone")

    res = client.post("/api/push/send-all", json={"title": "Happy hour", "body": "2 for 1"}, headers=admins["admin"])

    data = res.json()["data"]
    assert (data["sent"], data["failed"], data["removed"], data["total"]) == (1, 1, 1, 2)
    assert stored_endpoints() == ["https://push.test/ok"]


def test_order_flow_notifies_user_and_admins(client, admins, vapid, monkeypatch):
    fake = FakePushService()
    monkeypatch.setattr(push, "webpush", fake)
    subscribe(client, "guest@example.com", "https://push.test/guest")
    subscribe(client, admins["admin"]["X-User-Email"], "https://push.test/cashier")

    order = client.post("/api/orders/create", json=order_body()).json()["data"]
    client.put(f"/api/orders/{order['id']}", json={"status": "Preparing"}, headers=admins["admin"])

    titles = [(endpoint, data) for endpoint, data in fake.sent]
    assert any(e == "https://push.test/guest" and "Order Placed!" in d for e, d in titles)
    assert any(e == "https://push.test/cashier" and "New Order Placed!" in d for e, d in titles)
    assert any(e == "https://push.test/guest" and "Your order is being prepared" in d for e, d in titles)


def test_push_failure_does_not_fail_order(client, vapid, monkeypatch):
    def broken(**kwargs):
        raise RuntimeError("push service down")

    monkeypatch.setattr(push, "webpush", broken)
    subscribe(client, "guest@example.com", "https://push.test/guest")

    res = client.post("/api/orders/create", json=order_body())

    assert res.status_code == 201


def test_slow_gone_subscription_is_pruned_after_timeout(vapid, monkeypatch):
    def slow_gone(subscription_info, **kwargs):
        time.sleep(0.2)
        raise WebPushException("Push failed: 410 Gone", response=types.SimpleNamespace(status_code=410))

    monkeypatch.setattr(push, "webpush", slow_gone)
    monkeypatch.setattr(push, "session_factory", TestSession)
    run_db(lambda session: subscription_crud.upsert_subscription(session, "guest@example.com", subscription_for("https://push.test/slow")))

    async def broadcast():
        async with TestSession() as session:
            result = await push.send_push_to_all(session, "t", "b", timeout=0.01)
        await push.wait_for_late_deliveries()
        return result

    result = asyncio.run(broadcast())

    assert (result["sent"], result["pending"], result["removed"]) == (0, 1, 0)
    assert stored_endpoints() == []
