"""
Custom exception classes for the Borrower Outreach Chat service.
"""
from typing import Optional, Any, Dict, Iterable
import uuid
from fastapi import HTTPException, status

from app.core.logging import get_correlation_id


class BaseAPIException(HTTPException):
    """Base exception for API errors."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[dict[str, Any]] = None,
        correlation_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code
        self.correlation_id = correlation_id or get_correlation_id() or str(uuid.uuid4())
        self.context = context or {}

    def __str__(self) -> str:
        return self.detail

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        return {
            "error": self.detail,
            "error_code": self.error_code,
            "correlation_id": self.correlation_id,
            "context": self.context,
        }


class ConfigurationError(BaseAPIException):
    """A required credential for a provider channel is missing."""

    def __init__(self, channel: str, missing: Iterable[str], detail: Optional[str] = None):
        self.channel = channel
        self.missing = list(missing)
        if not detail:
            detail = f"Server configuration error: Missing {channel} credentials"

        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code="CFG_001",
            context={"channel": channel, "missing": self.missing},
        )


class ProviderError(BaseAPIException):
    """The external AI, email or WhatsApp call failed."""

    def __init__(self, provider: str, message: str, **context):
        self.provider = provider
        self.provider_message = message

        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"{provider} Error: {message}",
            error_code="PRV_001",
            context={"provider": provider, **context},
        )


class BorrowerNotFoundError(BaseAPIException):
    """Exception for lookups of unknown borrower ids."""

    def __init__(self, borrower_id: int):
        self.borrower_id = borrower_id
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Borrower {borrower_id} not found",
            error_code="BRW_404",
            context={"borrower_id": borrower_id},
        )


class TurnInProgressError(BaseAPIException):
    """A turn is already in flight for this borrower."""

    def __init__(self, borrower_id: int):
        self.borrower_id = borrower_id
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A message for borrower {borrower_id} is still being processed",
            error_code="TRN_409",
            context={"borrower_id": borrower_id},
        )


# Non-API context exceptions
class DirectoryLoadError(Exception):
    """The borrower fixture could not be read or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to load borrower directory from '{path}': {reason}")


class ValidationException(Exception):
    """Exception for input that is ignored rather than reported."""

    def __init__(self, detail: str, field: Optional[str] = None, value: Optional[Any] = None):
        self.field = field
        self.value = value
        message = f"Validation failed: {detail}"
        if field:
            message = f"Validation failed for field '{field}': {detail}"
        super().__init__(message)
