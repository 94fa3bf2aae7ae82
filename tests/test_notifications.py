import uuid
from decimal import Decimal

import pytest

from app.api.orders.state_machine import OrderStateMachine
from app.models import Order, OrderItem, OrderItemAddOn, OrderStatus, Product
from app.services.email_service import EmailService
from app.services.notification_dispatcher import NotificationDispatcher
from app.utils.helpers import format_currency
from conftest import RecordingTransport


def _order(status=OrderStatus.PLACED):
    item = OrderItem(
        product=Product(name="Premium Chocolate Cake"),
        quantity=1,
        unit_price=Decimal("3500.00"),
        line_total=Decimal("3650.00"),
        add_ons=[OrderItemAddOn(add_on_name="Extra Candles", add_on_price=Decimal("150.00"))],
    )
    return Order(
        id=uuid.UUID("3f2a9c1e-0000-4000-8000-000000000000"),
        customer_name="Nimali Perera",
        customer_email="nimali@example.com",
        customer_phone="+94 77 123 4567",
        customer_address="12 Galle Road, Colombo 03",
        total=Decimal("4150.00"),
        status=status,
        items=[item],
    )


class FlakyTransport(RecordingTransport):
    """Fails only for the admin mailbox"""

    async def send(self, message, recipients):
        if "admin@velvetcrumbs.lk" in recipients:
            raise ConnectionError("mailbox full")
        await super().send(message, recipients)


def test_format_currency():
    assert format_currency(Decimal("1234")) == "LKR 1,234.00"


async def test_order_placed_sends_both_emails():
    transport = RecordingTransport()
    result = await NotificationDispatcher(EmailService(transport=transport)).order_placed(_order())

    assert result == {"customer": True, "admin": True, "success": True}
    assert {m["subject"] for m in transport.sent} == {
        "Order Confirmation - #3F2A9C1E",
        "New Order Received - #3F2A9C1E",
    }
    admin_mail = next(m for m in transport.sent if m["to"] == ["admin@velvetcrumbs.lk"])
    assert admin_mail["reply_to"] == "nimali@example.com"


async def test_partial_delivery_still_counts_as_success():
    transport = FlakyTransport()
    result = await NotificationDispatcher(EmailService(transport=transport)).order_placed(_order())

    assert result == {"customer": True, "admin": False, "success": True}


async def test_total_failure_is_reported_not_raised():
    transport = RecordingTransport()
    transport.fail = True
    result = await NotificationDispatcher(EmailService(transport=transport)).order_placed(_order())

    assert result == {"customer": False, "admin": False, "success": False}


async def test_status_update_subject_uses_label():
    transport = RecordingTransport()
    sent = await NotificationDispatcher(EmailService(transport=transport)).order_status_changed(
        _order(OrderStatus.IN_PROGRESS)
    )

    assert sent is True
    assert transport.sent[0]["subject"] == "Order #3F2A9C1E - In Progress"


def test_confirmation_body_lists_add_ons():
    service = EmailService(transport=RecordingTransport())
    context = service._order_context(_order())

    text = service._items_text(context)
    assert "1x Premium Chocolate Cake - LKR 3,650.00" in text
    assert "+ Extra Candles (LKR 150.00)" in text
    assert context["delivery_fee"] == Decimal("500.00")

    html = service.env.get_template("order_confirmation.html").render(**context)
    assert "Extra Candles" in html
    assert "LKR 4,150.00" in html


@pytest.mark.parametrize("current,new,allowed", [
    (OrderStatus.PLACED, OrderStatus.IN_PROGRESS, True),
    (OrderStatus.PLACED, OrderStatus.COMPLETED, False),
    (OrderStatus.IN_PROGRESS, OrderStatus.CANCELED, True),
    (OrderStatus.COMPLETED, OrderStatus.CANCELED, False),
    (OrderStatus.CANCELED, OrderStatus.PLACED, False),
    (OrderStatus.DELIVERED, OrderStatus.DELIVERED, True),
])
def test_strict_transitions(current, new, allowed):
    assert OrderStateMachine("strict").can_transition(current, new) is allowed


def test_free_policy_allows_everything():
    machine = OrderStateMachine("free")
    assert all(machine.can_transition(OrderStatus.COMPLETED, s) for s in OrderStatus)
    assert OrderStatus.COMPLETED not in machine.get_valid_transitions(OrderStatus.COMPLETED)


def test_unknown_policy_rejected():
    with pytest.raises(ValueError):
        OrderStateMachine("lenient")
