import asyncio
import os
import tempfile
from pathlib import Path

import pytest

# Settings are read at import time, so the environment goes first
_DB_DIR = tempfile.mkdtemp(prefix="velvet-crumbs-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_DB_DIR) / 'test.db'}"
os.environ["EMAIL_BACKEND"] = "console"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ORDER_PRICE_POLICY"] = "trust_client"
os.environ["ORDER_STATUS_POLICY"] = "free"

from fastapi.testclient import TestClient  # noqa: E402

from app.core.database import drop_db, get_db_context, init_db  # noqa: E402
from app.main import app  # noqa: E402
from app.services.email_service import EmailService, MailTransport  # noqa: E402
from app.services.notification_dispatcher import (  # noqa: E402
    NotificationDispatcher,
    get_notification_dispatcher,
)
from app.utils.seed import ensure_admin  # noqa: E402

ADMIN_PASSWORD = "Complex123@"


class RecordingTransport(MailTransport):
    """Keeps sent messages in memory; can be told to fail"""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send(self, message, recipients):
        if self.fail:
            raise ConnectionError("SMTP relay unreachable")
        self.sent.append({"subject": message["Subject"], "to": recipients, "reply_to": message["Reply-To"]})


@pytest.fixture
def mail():
    return RecordingTransport()


@pytest.fixture(autouse=True)
def fresh_database(mail):
    """Every test starts from empty tables and a recording mail transport"""
    asyncio.run(drop_db())
    asyncio.run(init_db())

    app.dependency_overrides[get_notification_dispatcher] = lambda: NotificationDispatcher(
        EmailService(transport=mail)
    )
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client():
    async def _create():
        async with get_db_context() as db:
            await ensure_admin(db, username="admin", email="admin@velvetcrumbs.lk", password=ADMIN_PASSWORD)

    asyncio.run(_create())

    with TestClient(app) as c:
        res = c.post("/api/login", json={"usernameOrEmail": "admin", "password": ADMIN_PASSWORD})
        assert res.status_code == 200, res.text
        yield c


def register(c, username="jane", email=None, password="secret123", **extra):
    payload = {"username": username, "email": email or f"{username}@example.com", "password": password}
    payload.update(extra)
    return c.post("/api/register", json=payload)


@pytest.fixture
def user_client():
    with TestClient(app) as c:
        res = register(c)
        assert res.status_code == 201, res.text
        yield c


@pytest.fixture
def make_category(admin_client):
    def _make(name="Premium Cakes", icon="birthday-cake", **extra):
        res = admin_client.post("/api/admin/categories", json={"name": name, "icon": icon, **extra})
        assert res.status_code == 201, res.text
        return res.json()

    return _make


@pytest.fixture
def make_product(admin_client, make_category):
    state = {}

    def _make(name="Chocolate Cake", price="1000.00", category_id=None, **extra):
        if category_id is None:
            if "category" not in state:
                state["category"] = make_category()
            category_id = state["category"]["id"]
        payload = {
            "name": name,
            "price": price,
            "image": "https://img.example.com/cake.jpg",
            "categoryId": category_id,
            **extra,
        }
        res = admin_client.post("/api/admin/products", json=payload)
        assert res.status_code == 201, res.text
        return res.json()

    return _make


@pytest.fixture
def make_add_on(admin_client):
    def _make(name="Extra Candles", price="150.00"):
        res = admin_client.post("/api/admin/addons", json={"name": name, "additionalPrice": price})
        assert res.status_code == 201, res.text
        return res.json()

    return _make


def order_payload(lines, total, **contact):
    """lines: (product, quantity) or (product, quantity, [add_on, ...])"""
    items = []
    for line in lines:
        product, quantity = line[0], line[1]
        add_ons = line[2] if len(line) > 2 else []
        add_on_total = sum(float(a["additionalPrice"]) for a in add_ons)
        items.append({
            "productId": product["id"],
            "quantity": quantity,
            "unitPrice": product["price"],
            "lineTotal": f"{float(product['price']) * quantity + add_on_total:.2f}",
            "addOnIds": [a["id"] for a in add_ons],
        })
    return {
        "customerName": contact.get("name", "Nimali Perera"),
        "customerEmail": contact.get("email", "nimali@example.com"),
        "customerPhone": contact.get("phone", "+94 77 123 4567"),
        "customerAddress": contact.get("address", "12 Galle Road, Colombo 03"),
        "total": total,
        "items": items,
    }
