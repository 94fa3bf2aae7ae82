"""Services package"""

from .email_service import EmailService
from .notification_dispatcher import NotificationDispatcher

__all__ = [
    "EmailService",
    "NotificationDispatcher",
]
