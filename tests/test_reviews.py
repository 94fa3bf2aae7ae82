from decimal import Decimal

from fastapi.testclient import TestClient

from app.main import app
from conftest import register

TEXT = "Moist, rich and beautifully decorated."


def _review(c, product, rating, text=TEXT):
    return c.post("/api/reviews", json={"productId": product["id"], "rating": rating, "reviewText": text})


def test_stats_without_reviews(client, make_product):
    product = make_product()
    res = client.get(f"/api/products/{product['id']}/rating-stats")
    assert res.status_code == 200
    assert res.json() == {"average": 0.0, "count": 0}


def test_stats_and_cached_rating(client, make_product):
    product = make_product()
    for name, rating in (("amal", 5), ("bimal", 3), ("chamari", 4)):
        with TestClient(app) as c:
            register(c, username=name)
            assert _review(c, product, rating).status_code == 201

    stats = client.get(f"/api/products/{product['id']}/rating-stats").json()
    assert stats == {"average": 4.0, "count": 3}

    detail = client.get(f"/api/products/{product['id']}").json()
    assert Decimal(detail["rating"]) == Decimal("4.0")

    reviews = client.get(f"/api/products/{product['id']}/reviews").json()
    assert {r["user"]["username"] for r in reviews} == {"amal", "bimal", "chamari"}


def test_average_rounds_to_one_decimal(client, make_product):
    product = make_product()
    for name, rating in (("amal", 5), ("bimal", 4), ("chamari", 4)):
        with TestClient(app) as c:
            register(c, username=name)
            _review(c, product, rating)

    assert client.get(f"/api/products/{product['id']}/rating-stats").json()["average"] == 4.3


def test_one_review_per_user_and_product(user_client, make_product):
    product = make_product()
    assert _review(user_client, product, 5).status_code == 201
    res = _review(user_client, product, 4)
    assert res.status_code == 409


def test_duplicate_review_rejected_when_lookup_misses(user_client, make_product, monkeypatch):
    from app.api.reviews.services import ReviewService

    product = make_product()
    assert _review(user_client, product, 5).status_code == 201

    async def no_existing_review(self, user_id, product_id):
        return None

    monkeypatch.setattr(ReviewService, "get_user_review_for_product", no_existing_review)

    res = _review(user_client, product, 4)
    assert res.status_code == 409
    assert res.json()["error_code"] == "DUPLICATE_REVIEW"

    monkeypatch.undo()
    stats = user_client.get(f"/api/products/{product['id']}/rating-stats").json()
    assert stats == {"average": 5.0, "count": 1}


def test_review_requires_login(client, make_product):
    assert _review(client, make_product(), 5).status_code == 401


def test_review_validation(user_client, make_product):
    product = make_product()
    assert _review(user_client, product, 6).status_code == 400
    assert _review(user_client, product, 0).status_code == 400
    assert _review(user_client, product, 5, text="too short").status_code == 400
    assert _review(user_client, product, 5, text="x" * 1001).status_code == 400


def test_review_for_unknown_product_is_404(user_client):
    res = user_client.post("/api/reviews", json={
        "productId": "00000000-0000-0000-0000-000000000000", "rating": 5, "reviewText": TEXT,
    })
    assert res.status_code == 404


def test_review_text_is_sanitized(user_client, make_product):
    product = make_product()
    res = _review(user_client, product, 5, text="<script>alert(1)</script>Lovely sponge cake")
    assert res.status_code == 201
    assert "<script>" not in res.json()["reviewText"]


def test_only_author_or_admin_may_edit(user_client, admin_client, make_product):
    product = make_product()
    review = _review(user_client, product, 2).json()

    with TestClient(app) as other:
        register(other, username="mallika")
        assert other.put(f"/api/reviews/{review['id']}", json={"rating": 1}).status_code == 403
        assert other.delete(f"/api/reviews/{review['id']}").status_code == 403

    res = user_client.put(f"/api/reviews/{review['id']}", json={"rating": 4})
    assert res.status_code == 200
    assert res.json()["rating"] == 4

    assert admin_client.delete(f"/api/reviews/{review['id']}").status_code == 204


def test_deleting_last_review_resets_rating(user_client, admin_client, make_product, client):
    product = make_product()
    review = _review(user_client, product, 2).json()
    assert Decimal(client.get(f"/api/products/{product['id']}").json()["rating"]) == Decimal("2.0")

    assert admin_client.delete(f"/api/admin/reviews/{review['id']}").status_code == 204
    assert Decimal(client.get(f"/api/products/{product['id']}").json()["rating"]) == Decimal("5.0")


def test_user_review_listing_and_check(user_client, make_product):
    product = make_product()
    other = make_product(name="Ribbon Cake")

    check = user_client.get(f"/api/user/reviews/check/{product['id']}").json()
    assert check == {"hasReviewed": False, "review": None}

    review = _review(user_client, product, 5).json()
    check = user_client.get(f"/api/user/reviews/check/{product['id']}").json()
    assert check["hasReviewed"] is True
    assert check["review"]["id"] == review["id"]
    assert user_client.get(f"/api/user/reviews/check/{other['id']}").json()["hasReviewed"] is False

    mine = user_client.get("/api/user/reviews").json()
    assert [r["product"]["name"] for r in mine] == ["Chocolate Cake"]
