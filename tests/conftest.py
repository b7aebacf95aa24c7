"""
Pytest configuration and fixtures for the Borrower Outreach Chat service.
"""
import pytest
from typing import Generator, List, Optional
from fastapi.testclient import TestClient

from app.main import app
from app.config import Settings, settings
from app.core.dependencies import (
    get_borrower_directory,
    get_chat_adapter,
    get_conversation_store,
    get_email_adapter,
    get_whatsapp_adapter,
)
from app.models.schemas import Borrower
from app.services.borrower_directory import BorrowerDirectory
from app.services.conversation_store import ConversationStore
from app.services.providers import AdapterResult


class StubAdapter:
    """Stand-in for a provider adapter that records its requests."""

    def __init__(
        self,
        channel: str,
        provider: str,
        result: Optional[AdapterResult] = None,
        raises: Optional[Exception] = None,
        calls: Optional[List[str]] = None,
    ):
        self.channel = channel
        self.provider = provider
        self.result = result or AdapterResult.success()
        self.raises = raises
        self.calls = calls
        self.requests = []

    def credentials(self) -> dict:
        return {"TOKEN": "configured"}

    async def send(self, request):
        self.requests.append(request)
        if self.calls is not None:
            self.calls.append(self.channel)
        if self.raises is not None:
            raise self.raises
        return self.result

    async def send_or_raise(self, request):
        result = await self.send(request)
        return result.unwrap()


@pytest.fixture
def stub_adapter():
    """Factory for StubAdapter instances."""
    return StubAdapter


@pytest.fixture
def test_settings() -> Settings:
    """Settings with every provider credential present."""
    return Settings(
        openai_api_key="test-key",
        openai_model="gpt-4-turbo",
        email_host="smtp.example.com",
        email_port=465,
        email_user="collections@example.com",
        email_pass="secret",
        twilio_account_sid="AC123",
        twilio_auth_token="token",
        twilio_phone_number="+14155238886",
    )


@pytest.fixture
def unconfigured_settings() -> Settings:
    """Settings with every provider credential blank."""
    return Settings(
        openai_api_key="",
        email_host="",
        email_user="",
        email_pass="",
        twilio_account_sid="",
        twilio_auth_token="",
        twilio_phone_number="",
    )


@pytest.fixture
def sample_borrower() -> Borrower:
    return Borrower(
        id=1,
        name="Asha",
        email="a@x.com",
        phone="+910000",
        outstandingAmount=500,
    )


@pytest.fixture
def directory(sample_borrower) -> BorrowerDirectory:
    return BorrowerDirectory(
        [
            sample_borrower,
            Borrower(id=2, name="Rahul", email="r@x.com", phone="+910001", outstandingAmount=1250.5),
        ]
    )


@pytest.fixture
def store() -> ConversationStore:
    return ConversationStore()


@pytest.fixture
def chat_stub(stub_adapter):
    return stub_adapter("OpenAI", "OpenAI API", result=AdapterResult.success("It's due Friday."))


@pytest.fixture
def whatsapp_stub(stub_adapter):
    return stub_adapter("Twilio", "Twilio API", result=AdapterResult.success("SM123"))


@pytest.fixture
def email_stub(stub_adapter):
    return stub_adapter("email", "SMTP")


@pytest.fixture
def client(directory, store, chat_stub, whatsapp_stub, email_stub) -> Generator[TestClient, None, None]:
    """
    Create a test client for the FastAPI application.

    The directory, store and adapters are replaced so no provider is called.
    """
    app.dependency_overrides[get_borrower_directory] = lambda: directory
    app.dependency_overrides[get_conversation_store] = lambda: store
    app.dependency_overrides[get_chat_adapter] = lambda: chat_stub
    app.dependency_overrides[get_whatsapp_adapter] = lambda: whatsapp_stub
    app.dependency_overrides[get_email_adapter] = lambda: email_stub

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_headers() -> dict:
    """Sample request headers with correlation ID."""
    return {
        "X-Correlation-ID": "test-correlation-123",
        "Content-Type": "application/json",
    }


@pytest.fixture
def api_prefix() -> str:
    """Get the API prefix from settings."""
    return settings.api_prefix
