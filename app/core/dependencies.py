"""
Dependency injection for FastAPI application.

Provides cached factory functions for the process-wide service instances.
Tests replace them through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends

from app.config import get_settings
from app.services.ai_service import AIChatAdapter
from app.services.borrower_directory import BorrowerDirectory
from app.services.conversation_store import ConversationStore
from app.services.email_service import EmailAdapter
from app.services.orchestrator import ConversationOrchestrator
from app.services.whatsapp_service import WhatsAppAdapter


@lru_cache()
def get_borrower_directory() -> BorrowerDirectory:
    """Get the borrower directory, loading the fixture on first use."""
    return BorrowerDirectory.from_file(get_settings().borrowers_file)


@lru_cache()
def get_conversation_store() -> ConversationStore:
    """Get the process-wide conversation store."""
    return ConversationStore()


@lru_cache()
def get_chat_adapter() -> AIChatAdapter:
    return AIChatAdapter(get_settings())


@lru_cache()
def get_whatsapp_adapter() -> WhatsAppAdapter:
    return WhatsAppAdapter(get_settings())


@lru_cache()
def get_email_adapter() -> EmailAdapter:
    return EmailAdapter(get_settings())


def get_orchestrator(
    store: ConversationStore = Depends(get_conversation_store),
    directory: BorrowerDirectory = Depends(get_borrower_directory),
    chat_adapter: AIChatAdapter = Depends(get_chat_adapter),
    whatsapp_adapter: WhatsAppAdapter = Depends(get_whatsapp_adapter),
    email_adapter: EmailAdapter = Depends(get_email_adapter),
) -> ConversationOrchestrator:
    """
    Build the orchestrator over the shared store and adapters.

    The orchestrator itself is stateless; all conversation state lives in the
    injected store.
    """
    return ConversationOrchestrator(
        store=store,
        directory=directory,
        chat_adapter=chat_adapter,
        whatsapp_adapter=whatsapp_adapter,
        email_adapter=email_adapter,
    )
