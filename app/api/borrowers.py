"""
Borrower directory endpoint.
"""
from typing import List

from fastapi import APIRouter, Depends
import structlog

from app.core.dependencies import get_borrower_directory
from app.models.schemas import Borrower
from app.services.borrower_directory import BorrowerDirectory

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["borrowers"])


@router.get("/borrowers", response_model=List[Borrower])
async def list_borrowers(directory: BorrowerDirectory = Depends(get_borrower_directory)):
    """Return the static borrower list in fixture order."""
    borrowers = directory.list_borrowers()
    logger.info("Borrowers listed", borrower_count=len(borrowers))
    return borrowers
