"""
Provider proxy endpoints.

Each endpoint forwards its body to one adapter and relays the reply, or the
adapter's typed error, which the application exception handler renders as
``{"error": ...}`` with a 500 (configuration) or 502 (provider) status.
"""
from fastapi import APIRouter, Depends
import structlog

from app.core.dependencies import get_chat_adapter, get_email_adapter, get_whatsapp_adapter
from app.models.schemas import (
    ChatRequest,
    ChatResponse,
    DeliveryResponse,
    EmailRequest,
    WhatsAppRequest,
)
from app.services.ai_service import AIChatAdapter
from app.services.email_service import EmailAdapter
from app.services.whatsapp_service import WhatsAppAdapter

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["channels"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    adapter: AIChatAdapter = Depends(get_chat_adapter),
):
    """Generate an AI reply for a borrower given the prior history."""
    logger.info("Chat request received", borrower_id=request.borrower.id, history_length=len(request.history))
    reply = await adapter.send_or_raise(request)
    return ChatResponse(reply=reply)


@router.post("/whatsapp", response_model=DeliveryResponse)
async def send_whatsapp(
    request: WhatsAppRequest,
    adapter: WhatsAppAdapter = Depends(get_whatsapp_adapter),
):
    """Send one WhatsApp message."""
    message_id = await adapter.send_or_raise(request)
    return DeliveryResponse(success=True, message_id=message_id)


@router.post("/email", response_model=DeliveryResponse)
async def send_email(
    request: EmailRequest,
    adapter: EmailAdapter = Depends(get_email_adapter),
):
    """Send one email."""
    await adapter.send_or_raise(request)
    return DeliveryResponse(success=True)
