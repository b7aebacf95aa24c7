"""
AI chat adapter generating collections replies with the OpenAI API.
"""
from typing import Any, Dict, List, Optional

import openai
import structlog

from app.config import Settings, get_settings
from app.core.exceptions import ProviderError
from app.models.schemas import Borrower, ChatRequest, Message, MessageSender
from app.services.providers import ProviderAdapter

logger = structlog.get_logger(__name__)

_ROLES = {
    MessageSender.USER: "user",
    MessageSender.AI: "assistant",
}


def format_amount(amount: float) -> str:
    """Render whole amounts without a trailing ``.0``."""
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)


def build_prompt(borrower: Borrower, message: str) -> str:
    """Directive prompt framing the assistant as a collections agent."""
    return (
        "You are a friendly and empathetic debt collection agent. "
        f"Help the borrower, {borrower.name}, understand their outstanding amount "
        f"of ${format_amount(borrower.outstanding_amount)}. "
        f'The user\'s latest message is: "{message}"'
    )


def prior_history(history: List[Message], message: str) -> List[Message]:
    """Drop the in-flight user message if the caller included it."""
    if history and history[-1].sender == MessageSender.USER and history[-1].text == message:
        return history[:-1]
    return history


class AIChatAdapter(ProviderAdapter):
    """Adapter for chat completions."""

    channel = "OpenAI"
    provider = "OpenAI API"
    config_error_detail = "Server configuration error: Missing API Key"

    def __init__(self, settings: Optional[Settings] = None, client: Optional[Any] = None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self):
        if self._client is None:
            # Retries are disabled: one external call per adapter invocation
            self._client = openai.AsyncOpenAI(
                api_key=self.settings.openai_api_key,
                timeout=self.settings.openai_timeout,
                max_retries=0,
            )
        return self._client

    def credentials(self) -> Dict[str, Any]:
        return {"OPENAI_API_KEY": self.settings.openai_api_key}

    def build_messages(self, request: ChatRequest) -> List[Dict[str, str]]:
        """
        Replay prior turns as alternating user/assistant messages and finish
        with the directive prompt. Status messages are transcript-only and are
        never sent to the model.
        """
        messages = [
            {"role": _ROLES[msg.sender], "content": msg.text}
            for msg in prior_history(request.history, request.message)
            if msg.sender in _ROLES
        ]
        messages.append({"role": "user", "content": build_prompt(request.borrower, request.message)})
        return messages

    async def _call(self, request: ChatRequest) -> str:
        messages = self.build_messages(request)

        logger.info(
            "Generating AI response",
            borrower_id=request.borrower.id,
            model=self.settings.openai_model,
            history_length=len(messages) - 1,
        )

        try:
            response = await self.client.chat.completions.create(
                model=self.settings.openai_model,
                messages=messages,
                temperature=self.settings.openai_temperature,
                max_tokens=self.settings.openai_max_tokens,
            )
        except openai.APIError as e:
            raise ProviderError(self.provider, str(e)) from e

        if not response.choices or not response.choices[0].message.content:
            raise ProviderError(self.provider, "Empty response from model")

        reply = response.choices[0].message.content.strip()
        logger.info(
            "AI response generated successfully",
            borrower_id=request.borrower.id,
            response_length=len(reply),
        )
        return reply
