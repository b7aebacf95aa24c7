"""
Conversation orchestrator: runs one operator turn for a borrower.

A turn is strictly sequential: record the user message, obtain the AI reply,
notify over WhatsApp, then notify over email. Each notification appends one
status message whatever its outcome, so the operator always sees per-channel
delivery. A failed AI call ends the turn after the user message; nothing
already recorded is rolled back.
"""
from typing import List, Optional

import structlog

from app.core.exceptions import ProviderError, ValidationException
from app.core.logging import correlation_context, log_business_event
from app.models.schemas import (
    ChatRequest,
    EmailRequest,
    Message,
    TurnOutcome,
    TurnResult,
    WhatsAppRequest,
)
from app.services.ai_service import AIChatAdapter
from app.services.borrower_directory import BorrowerDirectory
from app.services.conversation_store import ConversationStore
from app.services.email_service import EmailAdapter
from app.services.providers import AdapterResult, ProviderAdapter
from app.services.whatsapp_service import WhatsAppAdapter

logger = structlog.get_logger(__name__)

WHATSAPP_SENT = "WhatsApp message sent ✔️"
WHATSAPP_FAILED = "WhatsApp message failed ❌"
EMAIL_SENT = "Email sent ✔️"
EMAIL_FAILED = "Email failed ❌"
EMAIL_SUBJECT = "Regarding your outstanding amount"


class ConversationOrchestrator:
    """Sequences the chat, WhatsApp and email adapters for one turn."""

    def __init__(
        self,
        store: ConversationStore,
        directory: BorrowerDirectory,
        chat_adapter: AIChatAdapter,
        whatsapp_adapter: WhatsAppAdapter,
        email_adapter: EmailAdapter,
    ):
        self.store = store
        self.directory = directory
        self.chat_adapter = chat_adapter
        self.whatsapp_adapter = whatsapp_adapter
        self.email_adapter = email_adapter

    @staticmethod
    def _validate(borrower_id: Optional[int], text: Optional[str]) -> None:
        if borrower_id is None:
            raise ValidationException("no borrower selected", field="borrower_id")
        if not text or not text.strip():
            raise ValidationException("message is empty", field="text", value=text)

    async def submit_user_message(self, borrower_id: Optional[int], text: Optional[str]) -> TurnResult:
        """
        Run one turn for ``borrower_id``.

        Empty input or a missing selection is ignored without touching state.
        Unknown borrower ids raise ``BorrowerNotFoundError``.
        """
        try:
            self._validate(borrower_id, text)
        except ValidationException as e:
            logger.debug("Ignoring message submission", reason=str(e))
            return TurnResult(outcome=TurnOutcome.IGNORED, borrower_id=borrower_id)

        borrower = self.directory.get_borrower(borrower_id)

        with correlation_context(borrower_id=borrower_id):
            return await self._run_turn(borrower, text)

    async def _run_turn(self, borrower, text: str) -> TurnResult:
        borrower_id = borrower.id
        appended: List[Message] = []

        prior = self.store.history(borrower_id)
        appended.append(self._append(borrower_id, Message.user(text)))
        self.store.record_sent(borrower_id)
        log_business_event("turn_started", borrower_id=borrower_id, history_length=len(prior))

        chat_request = ChatRequest(message=text, borrower=borrower, history=prior)
        try:
            chat = await self.chat_adapter.send(chat_request)
        except Exception as e:
            logger.error("Chat adapter raised", error=str(e), exc_info=True)
            chat = AdapterResult.failure(ProviderError(self.chat_adapter.provider, str(e)))

        if not chat.ok:
            error = f"Error: {chat.error_message}"
            logger.warning("AI reply failed, ending turn", error=chat.error_message)
            log_business_event("turn_failed", borrower_id=borrower_id, error=chat.error_message)
            return TurnResult(
                outcome=TurnOutcome.FAILED,
                borrower_id=borrower_id,
                appended=appended,
                error=error,
                counters=self.store.counters(borrower_id),
            )

        reply = chat.value
        appended.append(self._append(borrower_id, Message.ai(reply)))
        self.store.record_received(borrower_id)

        whatsapp_status = await self._notify(
            self.whatsapp_adapter,
            WhatsAppRequest(message=reply, to=borrower.phone),
            WHATSAPP_SENT,
            WHATSAPP_FAILED,
        )
        appended.append(self._append(borrower_id, Message.status(whatsapp_status)))

        email_status = await self._notify(
            self.email_adapter,
            EmailRequest(message=reply, to=borrower.email, subject=EMAIL_SUBJECT),
            EMAIL_SENT,
            EMAIL_FAILED,
        )
        appended.append(self._append(borrower_id, Message.status(email_status)))

        counters = self.store.counters(borrower_id)
        log_business_event(
            "turn_completed",
            borrower_id=borrower_id,
            whatsapp_delivered=whatsapp_status == WHATSAPP_SENT,
            email_delivered=email_status == EMAIL_SENT,
            sent=counters.sent,
            received=counters.received,
        )
        return TurnResult(
            outcome=TurnOutcome.COMPLETED,
            borrower_id=borrower_id,
            appended=appended,
            counters=counters,
        )

    def _append(self, borrower_id: int, message: Message) -> Message:
        self.store.append(borrower_id, message)
        return message

    async def _notify(
        self, adapter: ProviderAdapter, request, sent_text: str, failed_text: str
    ) -> str:
        """Run one notification adapter and map its outcome to status text."""
        try:
            result = await adapter.send(request)
        except Exception as e:
            logger.error("Notification raised", channel=adapter.channel, error=str(e), exc_info=True)
            log_business_event("notification_failed", channel=adapter.channel, error=str(e))
            return failed_text

        if not result.ok:
            log_business_event(
                "notification_failed", channel=adapter.channel, error=result.error_message
            )
            return failed_text
        return sent_text
