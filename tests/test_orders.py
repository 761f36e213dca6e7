from conftest import order_body


def _create(client, **overrides):
    res = client.post("/api/orders/create", json=order_body(**overrides))
    assert res.status_code == 201, res.text
    return res.json()["data"]


def test_create_order_applies_defaults(client):
    order = _create(client)

    assert order["status"] == "Order"
    assert order["paymentStatus"] == "Unpaid"
    assert order["paymentMethod"] is None
    assert order["userEmail"] == "guest@example.com"
    assert order["chairIndices"] == [0, 1]


def test_create_order_normalizes_email_and_blank_name(client):
    order = _create(client, userEmail="Guest@Example.com", userName="   ")

    assert order["userEmail"] == "guest@example.com"
    assert order["userName"] == "Guest User"


def test_quantity_must_be_positive(client):
    for quantity in (0, -3):
        res = client.post("/api/orders/create", json=order_body(quantity=quantity))
        assert res.status_code == 400
        body = res.json()
        assert body["success"] is False
        assert body["code"] == "VALIDATION_ERROR"
        assert {"field": "quantity", "message": "Quantity must be a positive integer"} in body["errors"]


def test_create_order_rejects_bad_fields(client):
    res = client.post(
        "/api/orders/create",
        json=order_body(userEmail="not-an-email", foodName="  ", price=0, tableNumber=41),
    )

    assert res.status_code == 400
    fields = {e["field"] for e in res.json()["errors"]}
    assert fields == {"userEmail", "foodName", "price", "tableNumber"}


def test_get_unknown_order_is_404_envelope(client):
    res = client.get("/api/orders/does-not-exist")

    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Order not found", "code": "NOT_FOUND"}


def test_update_requires_admin(client, admins):
    order = _create(client)

    res = client.put(f"/api/orders/{order['id']}", json={"status": "Preparing"})
    assert res.status_code == 403
    assert res.json()["code"] == "FORBIDDEN"

    res = client.put(
        f"/api/orders/{order['id']}",
        json={"status": "Preparing"},
        headers={"X-User-Email": "guest@example.com"},
    )
    assert res.status_code == 403


def test_update_rejects_unknown_status(client, admins):
    order = _create(client)

    res = client.put(f"/api/orders/{order['id']}", json={"status": "Cancelled"}, headers=admins["admin"])

    assert res.status_code == 400
    body = res.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["errors"][0]["field"] == "status"
    assert "Order, Preparing, Served, Completed" in body["errors"][0]["message"]


def test_update_with_no_fields_is_bad_request(client, admins):
    order = _create(client)

    res = client.put(f"/api/orders/{order['id']}", json={}, headers=admins["admin"])

    assert res.status_code == 400
    assert res.json()["code"] == "BAD_REQUEST"


def test_update_unknown_order_is_404(client, admins):
    res = client.put("/api/orders/missing", json={"status": "Served"}, headers=admins["admin"])

    assert res.status_code == 404


def test_update_changes_status_and_payment(client, admins):
    order = _create(client)

    res = client.put(
        f"/api/orders/{order['id']}",
        json={"status": "Completed", "paymentStatus": "Paid", "paymentMethod": "Cash"},
        headers=admins["admin"],
    )

    assert res.status_code == 200
    updated = res.json()["data"]
    assert updated["status"] == "Completed"
    assert updated["paymentStatus"] == "Paid"
    assert updated["paymentMethod"] == "Cash"
    assert updated["foodName"] == order["foodName"]


def test_create_multiple_orders(client):
    res = client.post(
        "/api/orders/create-multiple",
        json=[order_body(foodName="Dal Makhani"), order_body(foodName="Naan", quantity=4, price=40)],
    )

    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "2 orders created successfully"
    assert [o["foodName"] for o in body["data"]] == ["Dal Makhani", "Naan"]


def test_create_multiple_rejects_empty_and_invalid_lines(client):
    assert client.post("/api/orders/create-multiple", json=[]).status_code == 400

    res = client.post("/api/orders/create-multiple", json=[order_body(), order_body(quantity=0)])
    assert res.status_code == 400
    # nothing from the rejected checkout was saved
    assert client.get("/api/orders").json()["pagination"]["total"] == 0


def test_list_orders_filters_and_paginates(client):
    for i in range(3):
        _create(client, foodName=f"Dish {i}")
    _create(client, userEmail="other@example.com")

    res = client.get("/api/orders", params={"userEmail": "GUEST@example.com", "page": 1, "limit": 2})
    body = res.json()

    assert res.status_code == 200
    assert len(body["data"]) == 2
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}


def test_list_orders_rejects_bad_paging(client):
    assert client.get("/api/orders", params={"limit": 101}).status_code == 400
    assert client.get("/api/orders", params={"page": 0}).status_code == 400
    assert client.get("/api/orders", params={"status": "Lost"}).status_code == 400


def test_occupied_tables_groups_open_dine_in_orders(client, admins):
    _create(client, tableNumber=3, chairIndices=[2, 0])
    _create(client, tableNumber=3, chairIndices=[0, 3])
    _create(client, tableNumber=7, chairIndices=[1])
    served = _create(client, tableNumber=9, chairIndices=[1])
    _create(client, tableNumber=0, isInRestaurant=False, chairIndices=[])
    _create(client, tableNumber=12, isInRestaurant=False, chairIndices=[2])

    client.put(f"/api/orders/{served['id']}", json={"status": "Served"}, headers=admins["admin"])

    res = client.get("/api/orders/occupied-tables")

    assert res.status_code == 200
    assert res.json()["data"] == {"3": [0, 2, 3], "7": [1]}
