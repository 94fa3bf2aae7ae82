from decimal import Decimal

from fastapi.testclient import TestClient

from app.main import app
from conftest import order_payload, register


def test_guest_checkout_scenario(client, admin_client, make_product, mail):
    p1 = make_product(name="Chocolate Cake", price="1000.00")
    p2 = make_product(name="Cupcake Box", price="500.00")

    client.post("/api/cart", json={"productId": p1["id"], "quantity": 2})
    client.post("/api/cart", json={"productId": p2["id"], "quantity": 1})
    assert Decimal(client.get("/api/cart").json()["subtotal"]) == Decimal("2500.00")

    res = client.post("/api/orders", json=order_payload([(p1, 2), (p2, 1)], total="3000.00"))
    assert res.status_code == 201, res.text
    order = res.json()
    assert order["status"] == "placed"
    assert Decimal(order["total"]) == Decimal("3000.00")
    assert order["userId"] is None

    assert client.delete("/api/cart").status_code == 204
    assert client.get("/api/cart").json()["items"] == []

    detail = admin_client.get(f"/api/admin/orders/{order['id']}").json()
    assert len(detail["items"]) == 2
    by_product = {i["productId"]: i for i in detail["items"]}
    assert Decimal(by_product[p1["id"]]["lineTotal"]) == Decimal("2000.00")

    subjects = [m["subject"] for m in mail.sent]
    ref = order["id"][:8].upper()
    assert f"Order Confirmation - #{ref}" in subjects
    assert f"New Order Received - #{ref}" in subjects


def test_signed_in_order_is_linked_to_user(user_client, make_product):
    product = make_product()
    res = user_client.post("/api/orders", json=order_payload([(product, 1)], total="1500.00"))
    assert res.status_code == 201

    mine = user_client.get("/api/orders/mine").json()
    assert [o["id"] for o in mine] == [res.json()["id"]]
    assert len(mine[0]["items"]) == 1


def test_my_orders_requires_login(client):
    assert client.get("/api/orders/mine").status_code == 401


def test_empty_items_rejected(client):
    payload = order_payload([], total="500.00")
    res = client.post("/api/orders", json=payload)
    assert res.status_code == 400
    assert any(e["field"] == "items" for e in res.json()["errors"])


def test_blank_contact_field_rejected(client, make_product):
    product = make_product()
    payload = order_payload([(product, 1)], total="1500.00", name="   ")
    res = client.post("/api/orders", json=payload)
    assert res.status_code == 400
    assert any(e["field"] == "customerName" for e in res.json()["errors"])


def test_unknown_product_creates_nothing(client, admin_client, make_product):
    product = make_product()
    ghost = dict(product, id="00000000-0000-0000-0000-000000000000")

    res = client.post("/api/orders", json=order_payload([(product, 1), (ghost, 1)], total="2500.00"))
    assert res.status_code == 404
    assert admin_client.get("/api/admin/orders").json() == []


def test_failed_commit_leaves_no_order_rows(admin_client, make_product, mail, monkeypatch):
    from sqlalchemy.ext.asyncio import AsyncSession

    product = make_product(price="1000.00")
    commit = AsyncSession.commit
    calls = []

    async def flush_then_fail(self):
        calls.append(self)
        if len(calls) == 1:
            await self.flush()
            raise RuntimeError("connection lost")
        await commit(self)

    monkeypatch.setattr(AsyncSession, "commit", flush_then_fail)

    with TestClient(app, raise_server_exceptions=False) as c:
        res = c.post("/api/orders", json=order_payload([(product, 2)], total="2500.00"))
    assert res.status_code == 500
    assert res.json()["error_code"] == "INTERNAL_ERROR"

    monkeypatch.undo()
    assert admin_client.get("/api/admin/orders").json() == []
    assert mail.sent == []


def test_client_prices_are_trusted_by_default(client, make_product):
    product = make_product(price="1000.00")
    tampered = dict(product, price="1.00")

    res = client.post("/api/orders", json=order_payload([(tampered, 1)], total="501.00"))
    assert res.status_code == 201
    assert Decimal(res.json()["total"]) == Decimal("501.00")


def test_verify_policy_rejects_mismatched_prices(client, make_product, monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "ORDER_PRICE_POLICY", "verify")
    product = make_product(price="1000.00")
    tampered = dict(product, price="1.00")

    res = client.post("/api/orders", json=order_payload([(tampered, 1)], total="501.00"))
    assert res.status_code == 400
    fields = {e["field"] for e in res.json()["errors"]}
    assert "items.0.unitPrice" in fields

    res = client.post("/api/orders", json=order_payload([(product, 1)], total="1500.00"))
    assert res.status_code == 201


def test_add_on_snapshot_survives_add_on_deletion(client, admin_client, make_product, make_add_on):
    product = make_product(price="2000.00")
    candles = make_add_on(name="Extra Candles", price="150.00")

    res = client.post("/api/orders", json=order_payload([(product, 1, [candles])], total="2650.00"))
    assert res.status_code == 201
    order_id = res.json()["id"]

    admin_client.put(f"/api/admin/addons/{candles['id']}", json={"additionalPrice": "999.00"})
    assert admin_client.delete(f"/api/admin/addons/{candles['id']}").status_code == 204

    item = admin_client.get(f"/api/admin/orders/{order_id}").json()["items"][0]
    assert item["addOns"][0]["addOnName"] == "Extra Candles"
    assert Decimal(item["addOns"][0]["addOnPrice"]) == Decimal("150.00")
    assert item["addOns"][0]["addOnId"] is None


def test_notification_failure_does_not_fail_order(client, make_product, mail):
    mail.fail = True
    product = make_product()

    res = client.post("/api/orders", json=order_payload([(product, 1)], total="1500.00"))
    assert res.status_code == 201
    assert mail.sent == []


def test_product_with_orders_cannot_be_deleted(client, admin_client, make_product):
    product = make_product()
    client.post("/api/orders", json=order_payload([(product, 1)], total="1500.00"))

    res = admin_client.delete(f"/api/admin/products/{product['id']}")
    assert res.status_code == 409


def test_register_then_order_uses_session_user(client, make_product):
    register(client, username="dilan")
    product = make_product()
    order = client.post("/api/orders", json=order_payload([(product, 1)], total="1500.00")).json()
    assert order["userId"] == client.get("/api/user").json()["id"]
