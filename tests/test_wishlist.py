def test_wishlist_requires_login(client):
    assert client.get("/api/wishlist").status_code == 401


def test_add_check_remove(user_client, make_product):
    product = make_product()

    assert user_client.get(f"/api/wishlist/check/{product['id']}").json() == {"isInWishlist": False}

    res = user_client.post("/api/wishlist", json={"productId": product["id"]})
    assert res.status_code == 201
    assert res.json()["product"]["name"] == "Chocolate Cake"

    assert user_client.get(f"/api/wishlist/check/{product['id']}").json() == {"isInWishlist": True}
    assert [w["productId"] for w in user_client.get("/api/wishlist").json()] == [product["id"]]

    assert user_client.delete(f"/api/wishlist/{product['id']}").status_code == 204
    assert user_client.delete(f"/api/wishlist/{product['id']}").status_code == 404
    assert user_client.get("/api/wishlist").json() == []


def test_duplicate_wishlist_entry_conflicts(user_client, make_product):
    product = make_product()
    assert user_client.post("/api/wishlist", json={"productId": product["id"]}).status_code == 201

    res = user_client.post("/api/wishlist", json={"productId": product["id"]})
    assert res.status_code == 409
    assert res.json()["error_code"] == "ALREADY_IN_WISHLIST"


def test_unknown_product_is_404(user_client):
    res = user_client.post("/api/wishlist", json={"productId": "00000000-0000-0000-0000-000000000000"})
    assert res.status_code == 404


def test_deleted_product_leaves_wishlist(user_client, admin_client, make_product):
    product = make_product()
    user_client.post("/api/wishlist", json={"productId": product["id"]})

    assert admin_client.delete(f"/api/admin/products/{product['id']}").status_code == 204
    assert user_client.get("/api/wishlist").json() == []
