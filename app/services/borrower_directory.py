"""
Read-only borrower directory backed by a static JSON fixture.
"""
import json
from typing import Dict, List

import structlog
from pydantic import TypeAdapter, ValidationError

from app.core.exceptions import BorrowerNotFoundError, DirectoryLoadError
from app.models.schemas import Borrower

logger = structlog.get_logger(__name__)

_borrower_list = TypeAdapter(List[Borrower])


class BorrowerDirectory:
    """Immutable, ordered list of borrowers loaded once at startup."""

    def __init__(self, borrowers: List[Borrower]):
        index: Dict[int, Borrower] = {}
        for borrower in borrowers:
            if borrower.id in index:
                raise ValueError(f"Duplicate borrower id: {borrower.id}")
            index[borrower.id] = borrower

        self._borrowers = tuple(borrowers)
        self._index = index

    @classmethod
    def from_file(cls, path: str) -> "BorrowerDirectory":
        """
        Load the directory from a JSON fixture.

        Raises:
            DirectoryLoadError: If the fixture is missing, unreadable or invalid
        """
        try:
            with open(path, "r", encoding="utf-8") as fh:
                raw = json.load(fh)
            borrowers = _borrower_list.validate_python(raw)
            directory = cls(borrowers)
        except (OSError, json.JSONDecodeError, ValidationError, ValueError) as e:
            logger.error("Failed to load borrower directory", path=path, error=str(e))
            raise DirectoryLoadError(path, str(e)) from e

        logger.info("Borrower directory loaded", path=path, borrower_count=len(directory))
        return directory

    def __len__(self) -> int:
        return len(self._borrowers)

    def list_borrowers(self) -> List[Borrower]:
        """Return all borrowers in fixture order."""
        return list(self._borrowers)

    def get_borrower(self, borrower_id: int) -> Borrower:
        borrower = self._index.get(borrower_id)
        if borrower is None:
            raise BorrowerNotFoundError(borrower_id)
        return borrower
