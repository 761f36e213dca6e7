import pytest
from fastapi.testclient import TestClient

from conftest import ADMIN, order_body, override_get_db
from foodfantasy.db import get_db
from foodfantasy.main import app
from foodfantasy.utils.broadcast import manager


@pytest.fixture
def live():
    # one portal for both HTTP and websocket calls, so broadcasts reach the open sockets
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def identify(ws, kind, email):
    ws.send_json({"event": "identify", "data": {"type": kind, "email": email}})
    message = ws.receive_json()
    assert message["event"] == "identified"
    return message["data"]


def assert_nothing_queued(ws):
    ws.send_json({"event": "ping"})
    assert ws.receive_json() == {"event": "pong", "data": {}}


def test_new_order_reaches_admins_and_its_customer(live, admins):
    with live.websocket_connect("/ws") as admin_ws, \
            live.websocket_connect("/ws") as guest_ws, \
            live.websocket_connect("/ws") as stranger_ws:
        assert identify(admin_ws, "admin", ADMIN) == {"type": "admin", "email": ADMIN}
        identify(guest_ws, "user", "Guest@Example.com")
        identify(stranger_ws, "user", "someone@example.com")

        order = live.post("/api/orders/create", json=order_body()).json()["data"]

        for ws in (admin_ws, guest_ws):
            message = ws.receive_json()
            assert message["event"] == "newOrderPlaced"
            assert message["data"]["id"] == order["id"]
            assert message["data"]["userEmail"] == "guest@example.com"
        assert_nothing_queued(stranger_ws)


def test_checkout_sends_one_event_per_order(live):
    with live.websocket_connect("/ws") as ws:
        identify(ws, "user", "guest@example.com")

        res = live.post("/api/orders/create-multiple", json=[order_body(), order_body(foodName="Lassi")])
        ids = [o["id"] for o in res.json()["data"]]

        received = [ws.receive_json() for _ in ids]
        assert [m["event"] for m in received] == ["newOrderPlaced", "newOrderPlaced"]
        assert [m["data"]["id"] for m in received] == ids


def test_status_and_payment_events(live, admins):
    order = live.post("/api/orders/create", json=order_body()).json()["data"]

    with live.websocket_connect("/ws") as ws:
        identify(ws, "user", "guest@example.com")

        live.put(f"/api/orders/{order['id']}", json={"status": "Served", "paymentStatus": "Paid"}, headers=admins["admin"])
        changed, paid = ws.receive_json(), ws.receive_json()
        assert (changed["event"], changed["data"]["status"]) == ("orderStatusChanged", "Served")
        assert (paid["event"], paid["data"]["paymentStatus"]) == ("paymentSuccess", "Paid")

        # already paid; no second paymentSuccess
        live.put(f"/api/orders/{order['id']}", json={"paymentStatus": "Paid"}, headers=admins["admin"])
        assert_nothing_queued(ws)


def test_non_admin_cannot_join_admin_room(live):
    with live.websocket_connect("/ws") as impostor, live.websocket_connect("/ws") as guest_ws:
        assert identify(impostor, "admin", "mallory@example.com")["type"] == "user"
        identify(guest_ws, "user", "guest@example.com")

        live.post("/api/orders/create", json=order_body())

        assert guest_ws.receive_json()["event"] == "newOrderPlaced"
        assert_nothing_queued(impostor)


def test_menu_changes_reach_every_socket(live, admins):
    with live.websocket_connect("/ws") as ws:
        food = live.post(
            "/api/foods/add",
            json={"name": "Masala Dosa", "category": "South Indian", "type": "Veg", "price": 120},
            headers=admins["admin"],
        ).json()["data"]
        live.put(f"/api/foods/{food['id']}", json={"price": 135}, headers=admins["admin"])
        live.delete(f"/api/foods/{food['id']}", headers=admins["admin"])

        added, updated, deleted = ws.receive_json(), ws.receive_json(), ws.receive_json()
        assert (added["event"], added["data"]["name"]) == ("newFoodAdded", "Masala Dosa")
        assert (updated["event"], updated["data"]["price"]) == ("foodUpdated", 135)
        assert deleted == {"event": "foodDeleted", "data": {"id": food["id"]}}


def test_bad_messages_get_an_error_event(live):
    with live.websocket_connect("/ws") as ws:
        ws.send_text("not json")
        assert ws.receive_json()["event"] == "error"

        ws.send_json({"event": "dance"})
        assert ws.receive_json() == {"event": "error", "data": {"message": "Unknown event: dance"}}


def test_closed_sockets_leave_every_room(live):
    with live.websocket_connect("/ws") as ws:
        identify(ws, "user", "guest@example.com")
        assert manager.rooms

    assert not manager.active_connections
    assert not manager.rooms
