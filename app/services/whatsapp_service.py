"""
WhatsApp adapter delivering messages through the Twilio Messages API.
"""
from typing import Any, Dict, Optional

import httpx
import structlog

from app.config import Settings, get_settings
from app.core.exceptions import ProviderError
from app.models.schemas import WhatsAppRequest
from app.services.providers import ProviderAdapter

logger = structlog.get_logger(__name__)

MAX_WHATSAPP_LENGTH = 1600
ELLIPSIS = "..."


def truncate_for_whatsapp(body: str) -> str:
    """Cap the body at ``MAX_WHATSAPP_LENGTH`` characters, ellipsis included."""
    if len(body) <= MAX_WHATSAPP_LENGTH:
        return body
    return body[: MAX_WHATSAPP_LENGTH - len(ELLIPSIS)] + ELLIPSIS


def whatsapp_address(number: str) -> str:
    if number.startswith("whatsapp:"):
        return number
    return f"whatsapp:{number}"


class WhatsAppAdapter(ProviderAdapter):
    """Adapter for outbound WhatsApp messages."""

    channel = "Twilio"
    provider = "Twilio API"
    config_error_detail = "Server configuration error: Missing Twilio credentials"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.timeout = self.settings.twilio_timeout

    def credentials(self) -> Dict[str, Any]:
        return {
            "TWILIO_ACCOUNT_SID": self.settings.twilio_account_sid,
            "TWILIO_AUTH_TOKEN": self.settings.twilio_auth_token,
            "TWILIO_PHONE_NUMBER": self.settings.twilio_phone_number,
        }

    @property
    def messages_url(self) -> str:
        base = self.settings.twilio_api_base.rstrip("/")
        return f"{base}/Accounts/{self.settings.twilio_account_sid}/Messages.json"

    async def _call(self, request: WhatsAppRequest) -> Optional[str]:
        body = truncate_for_whatsapp(request.message)
        payload = {
            "From": whatsapp_address(self.settings.twilio_phone_number),
            "To": whatsapp_address(request.to),
            "Body": body,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                logger.info(
                    "Sending WhatsApp message",
                    to=payload["To"],
                    message_length=len(body),
                    truncated=len(body) != len(request.message),
                )
                response = await client.post(
                    self.messages_url,
                    data=payload,
                    auth=(self.settings.twilio_account_sid, self.settings.twilio_auth_token),
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                self.provider,
                _twilio_error_message(e.response),
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(self.provider, str(e) or type(e).__name__) from e

        message_sid = _message_sid(response)
        logger.info("WhatsApp message accepted", message_sid=message_sid)
        return message_sid


def _message_sid(response: httpx.Response) -> Optional[str]:
    """Sid of an accepted message; the body is not needed to report success."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        return data.get("sid")
    return None


def _twilio_error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(data, dict) and data.get("message"):
        return data["message"]
    return f"HTTP {response.status_code}"
