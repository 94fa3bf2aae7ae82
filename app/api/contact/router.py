"""
Pre-order inquiry form; forwarded to the shop owner, nothing is stored
"""

from fastapi import APIRouter, Depends, Request
import logging

from app.core.exceptions import InternalServerException
from app.middleware.rate_limit import contact_limiter
from app.middleware.security import sanitize_text
from app.schemas.contact import ContactInquiry, ContactResponse
from app.services.notification_dispatcher import NotificationDispatcher, get_notification_dispatcher

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=ContactResponse, summary="Send inquiry")
@contact_limiter
async def send_inquiry(
    request: Request,
    inquiry: ContactInquiry,
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    payload = inquiry.model_dump()
    payload["message"] = sanitize_text(payload.get("message"), max_length=5000)

    if not await dispatcher.contact_inquiry(payload):
        raise InternalServerException("Failed to send your inquiry. Please try again later.")

    logger.info(f"Contact inquiry forwarded from {inquiry.email}")
    return {"success": True, "message": "Thank you! We will get back to you soon."}
