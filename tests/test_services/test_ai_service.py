"""
Tests for the AI chat adapter.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai

from app.core.exceptions import ConfigurationError, ProviderError
from app.models.schemas import ChatRequest, Message
from app.services.ai_service import AIChatAdapter, build_prompt, format_amount, prior_history


def _completion(content):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


class TestPromptBuilding:
    """Prompt and history shaping."""

    def test_build_prompt_names_borrower_and_amount(self, sample_borrower):
        prompt = build_prompt(sample_borrower, "When is this due?")

        assert prompt == (
            "You are a friendly and empathetic debt collection agent. "
            "Help the borrower, Asha, understand their outstanding amount of $500. "
            'The user\'s latest message is: "When is this due?"'
        )

    @pytest.mark.parametrize(
        "amount, expected",
        [(500, "500"), (500.0, "500"), (1250.5, "1250.5"), (0, "0")],
    )
    def test_format_amount(self, amount, expected):
        assert format_amount(amount) == expected

    def test_prior_history_drops_trailing_in_flight_message(self):
        history = [Message.user("Hi"), Message.ai("Hello"), Message.user("Pay?")]

        assert prior_history(history, "Pay?") == history[:2]

    def test_prior_history_keeps_history_without_in_flight_message(self):
        history = [Message.user("Hi"), Message.ai("Hello")]

        assert prior_history(history, "Pay?") == history

    def test_build_messages_replays_turns_without_status(self, test_settings, sample_borrower):
        adapter = AIChatAdapter(test_settings, client=MagicMock())
        request = ChatRequest(
            message="Can I pay later?",
            borrower=sample_borrower,
            history=[
                Message.user("Hi"),
                Message.ai("Hello Asha"),
                Message.status("WhatsApp message sent ✔️"),
                Message.status("Email sent ✔️"),
            ],
        )

        messages = adapter.build_messages(request)

        assert messages[:2] == [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello Asha"},
        ]
        assert len(messages) == 3
        assert messages[2]["role"] == "user"
        assert 'The user\'s latest message is: "Can I pay later?"' in messages[2]["content"]


class TestAIChatAdapter:
    """Adapter call behavior."""

    @pytest.fixture
    def mock_client(self):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=_completion("  It's due Friday.  "))
        return client

    @pytest.fixture
    def chat_request(self, sample_borrower):
        return ChatRequest(message="When is this due?", borrower=sample_borrower, history=[])

    @pytest.mark.asyncio
    async def test_send_success(self, test_settings, mock_client, chat_request):
        adapter = AIChatAdapter(test_settings, client=mock_client)

        result = await adapter.send(chat_request)

        assert result.ok is True
        assert result.value == "It's due Friday."
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4-turbo"
        assert kwargs["messages"][-1]["role"] == "user"
        assert kwargs["temperature"] == test_settings.openai_temperature

    @pytest.mark.asyncio
    async def test_missing_api_key_is_configuration_error(self, unconfigured_settings, mock_client, chat_request):
        adapter = AIChatAdapter(unconfigured_settings, client=mock_client)

        result = await adapter.send(chat_request)

        assert result.ok is False
        assert isinstance(result.error, ConfigurationError)
        assert result.error.missing == ["OPENAI_API_KEY"]
        assert result.error_message == "Server configuration error: Missing API Key"
        mock_client.chat.completions.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_api_error_becomes_provider_error(self, test_settings, mock_client, chat_request):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(request=request)
        adapter = AIChatAdapter(test_settings, client=mock_client)

        result = await adapter.send(chat_request)

        assert result.ok is False
        assert isinstance(result.error, ProviderError)
        assert result.error_message.startswith("OpenAI API Error:")

    @pytest.mark.asyncio
    async def test_empty_completion_is_provider_error(self, test_settings, mock_client, chat_request):
        mock_client.chat.completions.create.return_value = _completion(None)
        adapter = AIChatAdapter(test_settings, client=mock_client)

        result = await adapter.send(chat_request)

        assert result.ok is False
        assert result.error_message == "OpenAI API Error: Empty response from model"

    @pytest.mark.asyncio
    async def test_send_or_raise_raises_typed_error(self, unconfigured_settings, mock_client, chat_request):
        adapter = AIChatAdapter(unconfigured_settings, client=mock_client)

        with pytest.raises(ConfigurationError):
            await adapter.send_or_raise(chat_request)

    def test_default_client_disables_retries(self, test_settings):
        adapter = AIChatAdapter(test_settings)

        assert adapter.client.max_retries == 0
