from decimal import Decimal

from conftest import register


def test_guest_cart_starts_empty(client):
    res = client.get("/api/cart")
    assert res.status_code == 200
    body = res.json()
    assert body["items"] == []
    assert body["itemCount"] == 0
    assert Decimal(body["subtotal"]) == 0


def test_add_same_product_twice_merges_quantity(client, make_product):
    product = make_product(price="1000.00")

    first = client.post("/api/cart", json={"productId": product["id"], "quantity": 2})
    assert first.status_code == 201
    second = client.post("/api/cart", json={"productId": product["id"], "quantity": 3})
    assert second.status_code == 201
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["quantity"] == 5

    body = client.get("/api/cart").json()
    assert len(body["items"]) == 1
    assert body["itemCount"] == 5
    assert Decimal(body["subtotal"]) == Decimal("5000.00")


def test_add_defaults_to_quantity_one(client, make_product):
    product = make_product()
    res = client.post("/api/cart", json={"productId": product["id"]})
    assert res.status_code == 201
    assert res.json()["quantity"] == 1


def test_add_unknown_product_is_404(client):
    res = client.post("/api/cart", json={"productId": "00000000-0000-0000-0000-000000000000"})
    assert res.status_code == 404


def test_add_rejects_zero_quantity(client, make_product):
    product = make_product()
    res = client.post("/api/cart", json={"productId": product["id"], "quantity": 0})
    assert res.status_code == 400
    assert res.json()["errors"]


def test_update_quantity_and_zero_removes(client, make_product):
    product = make_product()
    item = client.post("/api/cart", json={"productId": product["id"]}).json()

    res = client.patch(f"/api/cart/{item['id']}", json={"quantity": 4})
    assert res.status_code == 200
    assert res.json()["removed"] is False
    assert res.json()["item"]["quantity"] == 4

    res = client.patch(f"/api/cart/{item['id']}", json={"quantity": 0})
    assert res.status_code == 200
    assert res.json() == {"removed": True, "item": None}
    assert client.get("/api/cart").json()["items"] == []


def test_remove_item(client, make_product):
    product = make_product()
    item = client.post("/api/cart", json={"productId": product["id"]}).json()

    assert client.delete(f"/api/cart/{item['id']}").status_code == 204
    assert client.delete(f"/api/cart/{item['id']}").status_code == 404


def test_clear_is_idempotent(client, make_product):
    client.post("/api/cart", json={"productId": make_product(name="A")["id"]})
    client.post("/api/cart", json={"productId": make_product(name="B")["id"]})

    assert client.delete("/api/cart").status_code == 204
    assert client.get("/api/cart").json()["items"] == []
    assert client.delete("/api/cart").status_code == 204


def test_carts_are_isolated_between_sessions(client, user_client, make_product):
    product = make_product()
    item = client.post("/api/cart", json={"productId": product["id"]}).json()

    assert user_client.get("/api/cart").json()["items"] == []
    res = user_client.patch(f"/api/cart/{item['id']}", json={"quantity": 9})
    assert res.status_code == 404
    assert user_client.delete(f"/api/cart/{item['id']}").status_code == 404


def test_guest_cart_merges_into_user_cart_on_login(client, make_product):
    cake = make_product(name="Cake")
    cookies = make_product(name="Cookies", price="800.00")

    register(client, username="kasun")
    client.post("/api/cart", json={"productId": cake["id"], "quantity": 1})
    client.post("/api/logout")

    client.post("/api/cart", json={"productId": cake["id"], "quantity": 2})
    client.post("/api/cart", json={"productId": cookies["id"], "quantity": 1})

    res = client.post("/api/login", json={"usernameOrEmail": "kasun", "password": "secret123"})
    assert res.status_code == 200

    items = {i["productId"]: i["quantity"] for i in client.get("/api/cart").json()["items"]}
    assert items == {cake["id"]: 3, cookies["id"]: 1}


def test_concurrent_insert_falls_back_to_increment(client, make_product, monkeypatch):
    from app.api.cart.services import CartService

    product = make_product()
    first = client.post("/api/cart", json={"productId": product["id"], "quantity": 2})
    assert first.status_code == 201

    # The first lookup misses, as if another request inserted the row meanwhile
    lookup = CartService._find_item_id
    calls = []

    async def miss_once(self, user_id, session_id, product_id):
        calls.append(product_id)
        if len(calls) == 1:
            return None
        return await lookup(self, user_id, session_id, product_id)

    monkeypatch.setattr(CartService, "_find_item_id", miss_once)

    res = client.post("/api/cart", json={"productId": product["id"], "quantity": 3})
    assert res.status_code == 201
    assert res.json()["id"] == first.json()["id"]
    assert res.json()["quantity"] == 5
    assert len(calls) == 2

    items = client.get("/api/cart").json()["items"]
    assert len(items) == 1
    assert items[0]["quantity"] == 5
