"""Email service with template rendering and pluggable transport"""

import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import List, Dict, Any, Optional
import logging
from pathlib import Path
from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.core.config import settings
from app.models import Order, OrderStatus
from app.utils.helpers import format_currency

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates" / "emails"

STATUS_MESSAGES = {
    OrderStatus.PLACED: "We have received your order and will start on it shortly.",
    OrderStatus.IN_PROGRESS: "Our bakers are preparing your order.",
    OrderStatus.DELIVERED: "Your order has been delivered. Enjoy!",
    OrderStatus.COMPLETED: "Your order is complete. Thank you for choosing us!",
    OrderStatus.CANCELED: "Your order has been canceled. Contact us if this is unexpected.",
}

STATUS_LABELS = {
    OrderStatus.PLACED: "Placed",
    OrderStatus.IN_PROGRESS: "In Progress",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.COMPLETED: "Completed",
    OrderStatus.CANCELED: "Canceled",
}

class MailTransport:
    """Delivers an assembled message; raises on failure"""

    async def send(self, message: MIMEMultipart, recipients: List[str]) -> None:
        raise NotImplementedError

class SMTPTransport(MailTransport):
    """Sends through an SMTP relay using aiosmtplib"""

    def __init__(
        self,
        host: str = None,
        port: int = None,
        username: str = None,
        password: str = None,
        start_tls: bool = None,
        timeout: int = None,
    ):
        self.host = host or settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.username = username if username is not None else settings.SMTP_USER
        self.password = password if password is not None else settings.SMTP_PASSWORD
        self.start_tls = settings.SMTP_USE_TLS if start_tls is None else start_tls
        self.timeout = timeout or settings.SMTP_TIMEOUT

    async def send(self, message: MIMEMultipart, recipients: List[str]) -> None:
        await aiosmtplib.send(
            message,
            recipients=recipients,
            hostname=self.host,
            port=self.port,
            username=self.username or None,
            password=self.password or None,
            start_tls=self.start_tls,
            timeout=self.timeout,
        )

class ConsoleTransport(MailTransport):
    """Logs messages instead of sending them (local development)"""

    async def send(self, message: MIMEMultipart, recipients: List[str]) -> None:
        logger.info(f"[console email] to={', '.join(recipients)} subject={message['Subject']!r}")

def build_transport(backend: str = None) -> MailTransport:
    backend = backend or settings.EMAIL_BACKEND
    if backend == "smtp":
        return SMTPTransport()
    return ConsoleTransport()

class EmailService:
    """Renders transactional emails and hands them to the transport"""

    def __init__(self, transport: Optional[MailTransport] = None):
        self.transport = transport or build_transport()
        self.from_email = settings.SMTP_FROM_EMAIL
        self.from_name = settings.SMTP_FROM_NAME
        self.admin_email = settings.ADMIN_EMAIL

        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(['html', 'xml'])
        )
        self.env.filters["money"] = format_currency

    async def send_email(
        self,
        to_email: str,
        subject: str,
        body: str,
        html_body: Optional[str] = None,
        reply_to: Optional[str] = None,
        context: str = "",
    ) -> bool:
        """
        Send a single email

        Never raises: transport errors are logged with the recipient and
        context (e.g. the order id) and reported as False.
        """
        try:
            msg = MIMEMultipart('alternative')
            msg['Subject'] = subject
            msg['From'] = f"{self.from_name} <{self.from_email}>"
            msg['To'] = to_email
            if reply_to:
                msg['Reply-To'] = reply_to

            msg.attach(MIMEText(body, 'plain', 'utf-8'))
            if html_body:
                msg.attach(MIMEText(html_body, 'html', 'utf-8'))

            await self.transport.send(msg, [to_email])

            logger.info(f"Email sent successfully to {to_email} {context}".rstrip())
            return True

        except Exception as e:
            logger.error(f"Failed to send email to {to_email} {context}: {str(e)}")
            return False

    def _order_context(self, order: Order) -> Dict[str, Any]:
        items = []
        subtotal = 0
        for item in order.items:
            subtotal += item.line_total
            items.append({
                "name": item.product.name if item.product else "Item",
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "line_total": item.line_total,
                "add_ons": [
                    {"name": add_on.add_on_name, "price": add_on.add_on_price}
                    for add_on in item.add_ons
                ],
            })

        return {
            "app_name": settings.APP_NAME,
            "app_url": settings.FRONTEND_URL,
            "order": order,
            "order_ref": order.short_id,
            "items": items,
            "subtotal": subtotal,
            "delivery_fee": order.total - subtotal,
            "status_label": STATUS_LABELS.get(order.status, str(order.status)),
            "status_message": STATUS_MESSAGES.get(order.status, "Your order status has been updated."),
        }

    def _items_text(self, context: Dict[str, Any]) -> str:
        lines = []
        for item in context["items"]:
            lines.append(f"- {item['quantity']}x {item['name']} - {format_currency(item['line_total'])}")
            for add_on in item["add_ons"]:
                lines.append(f"    + {add_on['name']} ({format_currency(add_on['price'])})")
        return "\n".join(lines)

    async def send_order_confirmation(self, order: Order) -> bool:
        """Customer confirmation for a newly placed order"""
        context = self._order_context(order)
        html_body = self.env.get_template("order_confirmation.html").render(**context)
        body = (
            f"Hi {order.customer_name},\n\n"
            f"Thank you for your order #{context['order_ref']}.\n\n"
            f"{self._items_text(context)}\n\n"
            f"Total: {format_currency(order.total)}\n\n"
            f"{settings.APP_NAME}"
        )

        return await self.send_email(
            to_email=order.customer_email,
            subject=f"Order Confirmation - #{context['order_ref']}",
            body=body,
            html_body=html_body,
            context=f"(order {order.id}, confirmation)",
        )

    async def send_admin_order_alert(self, order: Order) -> bool:
        """Alert the shop owner about a new order"""
        context = self._order_context(order)
        html_body = self.env.get_template("admin_new_order.html").render(**context)
        body = (
            f"New order #{context['order_ref']}\n\n"
            f"Customer: {order.customer_name}\n"
            f"Email: {order.customer_email}\n"
            f"Phone: {order.customer_phone}\n"
            f"Address: {order.customer_address}\n\n"
            f"Items:\n{self._items_text(context)}\n\n"
            f"Total: {format_currency(order.total)}"
        )

        return await self.send_email(
            to_email=self.admin_email,
            subject=f"New Order Received - #{context['order_ref']}",
            body=body,
            html_body=html_body,
            reply_to=order.customer_email,
            context=f"(order {order.id}, admin alert)",
        )

    async def send_order_status_update(self, order: Order) -> bool:
        """Tell the customer their order moved to a new status"""
        context = self._order_context(order)
        html_body = self.env.get_template("order_status_update.html").render(**context)
        body = (
            f"Hi {order.customer_name},\n\n"
            f"Your order #{context['order_ref']} is now {context['status_label']}.\n"
            f"{context['status_message']}\n\n"
            f"{settings.APP_NAME}"
        )

        return await self.send_email(
            to_email=order.customer_email,
            subject=f"Order #{context['order_ref']} - {context['status_label']}",
            body=body,
            html_body=html_body,
            context=f"(order {order.id}, status {order.status.value})",
        )

    async def send_contact_inquiry(self, inquiry: Dict[str, Any]) -> bool:
        """Forward a pre-order inquiry to the shop owner"""
        html_body = self.env.get_template("contact_inquiry.html").render(
            app_name=settings.APP_NAME, inquiry=inquiry
        )
        fields = [
            ("Name", inquiry.get("name")),
            ("Email", inquiry.get("email")),
            ("Phone", inquiry.get("phone")),
            ("Event type", inquiry.get("event_type")),
            ("Event date", inquiry.get("event_date")),
            ("Guests", inquiry.get("guest_count")),
        ]
        body = "\n".join(f"{label}: {value}" for label, value in fields if value)
        if inquiry.get("message"):
            body += f"\n\n{inquiry['message']}"

        return await self.send_email(
            to_email=self.admin_email,
            subject=f"New Inquiry from {inquiry.get('name')}",
            body=body,
            html_body=html_body,
            reply_to=inquiry.get("email"),
            context="(contact inquiry)",
        )
