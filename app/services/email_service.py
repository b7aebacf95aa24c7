"""
Email adapter sending plain-text mail over SMTP with implicit TLS.
"""
import asyncio
import smtplib
import ssl
from email.message import EmailMessage
from typing import Any, Dict, Optional

import structlog

from app.config import Settings, get_settings
from app.core.exceptions import ProviderError
from app.models.schemas import EmailRequest
from app.services.providers import ProviderAdapter

logger = structlog.get_logger(__name__)


class EmailAdapter(ProviderAdapter):
    """Adapter for transactional email."""

    channel = "email"
    provider = "SMTP"
    config_error_detail = "Server configuration error: Missing email credentials"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def credentials(self) -> Dict[str, Any]:
        return {
            "EMAIL_HOST": self.settings.email_host,
            "EMAIL_USER": self.settings.email_user,
            "EMAIL_PASS": self.settings.email_pass,
        }

    def build_message(self, request: EmailRequest) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.settings.email_user
        message["To"] = request.to
        message["Subject"] = request.subject
        message.set_content(request.message)
        return message

    def _deliver(self, message: EmailMessage) -> None:
        context = ssl.create_default_context()
        with smtplib.SMTP_SSL(
            self.settings.email_host,
            self.settings.email_port,
            timeout=self.settings.email_timeout,
            context=context,
        ) as server:
            server.login(self.settings.email_user, self.settings.email_pass)
            server.send_message(message)

    async def _call(self, request: EmailRequest) -> Optional[str]:
        message = self.build_message(request)
        logger.info(
            "Sending email",
            to=request.to,
            subject=request.subject,
            host=self.settings.email_host,
            port=self.settings.email_port,
        )

        try:
            # smtplib blocks; keep the event loop free
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            raise ProviderError(self.provider, str(e) or type(e).__name__) from e

        logger.info("Email sent", to=request.to)
        return None
