"""
Tests for custom exception hierarchy.
"""
import pytest
from fastapi import HTTPException, status

from app.core.exceptions import (
    BaseAPIException,
    BorrowerNotFoundError,
    ConfigurationError,
    DirectoryLoadError,
    ProviderError,
    TurnInProgressError,
    ValidationException,
)
from app.core.logging import correlation_context
from app.services.providers import require_credentials


class TestBaseAPIException:
    """Test base API exception."""

    def test_basic_creation(self):
        exc = BaseAPIException(status_code=400, detail="Test error", error_code="TEST_ERROR")

        assert isinstance(exc, HTTPException)
        assert exc.status_code == 400
        assert exc.detail == "Test error"
        assert exc.correlation_id is not None
        assert exc.context == {}
        assert str(exc) == "Test error"

    def test_correlation_id_from_context(self):
        with correlation_context(correlation_id="req-42"):
            exc = BaseAPIException(status_code=400, detail="Test error")

        assert exc.correlation_id == "req-42"

    def test_to_dict(self):
        exc = BaseAPIException(
            status_code=400,
            detail="Test error",
            error_code="TEST_ERROR",
            correlation_id="test-123",
            context={"field": "test"},
        )

        assert exc.to_dict() == {
            "error": "Test error",
            "error_code": "TEST_ERROR",
            "correlation_id": "test-123",
            "context": {"field": "test"},
        }


class TestDomainErrors:

    def test_configuration_error(self):
        exc = ConfigurationError("email", ["EMAIL_USER", "EMAIL_PASS"])

        assert exc.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert exc.error_code == "CFG_001"
        assert exc.detail == "Server configuration error: Missing email credentials"
        assert exc.context["missing"] == ["EMAIL_USER", "EMAIL_PASS"]

    def test_provider_error(self):
        exc = ProviderError("Twilio API", "Authenticate", status_code=401)

        assert exc.status_code == status.HTTP_502_BAD_GATEWAY
        assert exc.error_code == "PRV_001"
        assert exc.detail == "Twilio API Error: Authenticate"
        assert exc.provider_message == "Authenticate"
        assert exc.context == {"provider": "Twilio API", "status_code": 401}

    def test_configuration_and_provider_errors_are_distinct(self):
        assert not issubclass(ConfigurationError, ProviderError)
        assert not issubclass(ProviderError, ConfigurationError)

    def test_borrower_not_found(self):
        exc = BorrowerNotFoundError(7)

        assert exc.status_code == 404
        assert exc.borrower_id == 7

    def test_turn_in_progress(self):
        assert TurnInProgressError(1).status_code == status.HTTP_409_CONFLICT

    def test_directory_load_error_message(self):
        exc = DirectoryLoadError("/tmp/b.json", "not found")

        assert str(exc) == "Unable to load borrower directory from '/tmp/b.json': not found"

    def test_validation_exception_message(self):
        assert str(ValidationException("empty", field="text")) == "Validation failed for field 'text': empty"


class TestRequireCredentials:

    def test_all_present(self):
        require_credentials("Twilio", {"SID": "AC1", "TOKEN": "t"})

    def test_missing_listed_in_order(self):
        with pytest.raises(ConfigurationError) as exc_info:
            require_credentials("Twilio", {"SID": "", "TOKEN": None, "FROM": "+1"})

        assert exc_info.value.missing == ["SID", "TOKEN"]
        assert exc_info.value.channel == "Twilio"
