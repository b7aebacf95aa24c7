"""
Conversation endpoints: read a borrower's transcript and submit a turn.
"""
from fastapi import APIRouter, Depends
import structlog

from app.core.dependencies import (
    get_borrower_directory,
    get_conversation_store,
    get_orchestrator,
)
from app.core.exceptions import TurnInProgressError
from app.models.schemas import ConversationResponse, SubmitMessageRequest, TurnResult
from app.services.borrower_directory import BorrowerDirectory
from app.services.conversation_store import ConversationStore
from app.services.orchestrator import ConversationOrchestrator

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/conversations", tags=["conversations"])


@router.get("/{borrower_id}", response_model=ConversationResponse)
async def get_conversation(
    borrower_id: int,
    directory: BorrowerDirectory = Depends(get_borrower_directory),
    store: ConversationStore = Depends(get_conversation_store),
):
    """Transcript and counters for one borrower."""
    directory.get_borrower(borrower_id)
    return store.snapshot(borrower_id)


@router.post("/{borrower_id}/messages", response_model=TurnResult)
async def submit_message(
    borrower_id: int,
    request: SubmitMessageRequest,
    directory: BorrowerDirectory = Depends(get_borrower_directory),
    store: ConversationStore = Depends(get_conversation_store),
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
):
    """
    Submit an operator message and run the full turn.

    Only one turn per borrower may be in flight; a concurrent submission is
    rejected with 409 rather than racing on the transcript tail.
    """
    directory.get_borrower(borrower_id)

    if not store.begin_turn(borrower_id):
        logger.warning("Rejected concurrent submission", borrower_id=borrower_id)
        raise TurnInProgressError(borrower_id)

    try:
        result = await orchestrator.submit_user_message(borrower_id, request.text)
    finally:
        store.end_turn(borrower_id)

    logger.info(
        "Turn settled",
        borrower_id=borrower_id,
        outcome=result.outcome.value,
        appended=len(result.appended),
    )
    return result
