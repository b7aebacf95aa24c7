"""
Shared plumbing for provider adapters.

Every adapter wraps exactly one external call. Missing credentials are
detected before the call and reported as ``ConfigurationError``; anything
that goes wrong during the call becomes a ``ProviderError``. Neither escapes
``send``: callers receive an ``AdapterResult``.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import structlog

from app.core.exceptions import ConfigurationError, ProviderError
from app.core.logging import log_business_event

logger = structlog.get_logger(__name__)

AdapterError = Union[ConfigurationError, ProviderError]


@dataclass(frozen=True)
class AdapterResult:
    """Normalized outcome of one adapter call."""

    ok: bool
    value: Optional[str] = None
    error: Optional[AdapterError] = None

    @classmethod
    def success(cls, value: Optional[str] = None) -> "AdapterResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: AdapterError) -> "AdapterResult":
        return cls(ok=False, error=error)

    @property
    def error_message(self) -> Optional[str]:
        return self.error.detail if self.error is not None else None

    def unwrap(self) -> Optional[str]:
        """Return the value or raise the typed error."""
        if not self.ok:
            raise self.error
        return self.value


def require_credentials(
    channel: str, credentials: Dict[str, Any], detail: Optional[str] = None
) -> None:
    """
    Check that every named credential is present.

    Raises:
        ConfigurationError: Listing the missing setting names
    """
    missing = [name for name, value in credentials.items() if not value]
    if missing:
        raise ConfigurationError(channel, missing, detail=detail)


class ProviderAdapter(ABC):
    """Base class for the AI, email and WhatsApp adapters."""

    #: Label used in configuration error messages and logs
    channel: str = "provider"
    #: Prefix for ProviderError messages, e.g. "Twilio API"
    provider: str = "Provider"
    #: Configuration error detail shown to callers
    config_error_detail: Optional[str] = None

    @abstractmethod
    def credentials(self) -> Dict[str, Any]:
        """Settings that must be non-empty before the call is attempted."""

    @abstractmethod
    async def _call(self, request: Any) -> Optional[str]:
        """Perform the single external call."""

    async def send(self, request: Any) -> AdapterResult:
        """Run the capability check and the external call, never raising."""
        try:
            require_credentials(self.channel, self.credentials(), self.config_error_detail)
        except ConfigurationError as e:
            logger.error(
                "Provider not configured",
                channel=self.channel,
                missing=e.missing,
            )
            return AdapterResult.failure(e)

        try:
            value = await self._call(request)
        except ProviderError as e:
            error = e
        except Exception as e:
            error = ProviderError(self.provider, str(e) or type(e).__name__)
        else:
            logger.info("Provider call succeeded", channel=self.channel)
            return AdapterResult.success(value)

        logger.error("Provider call failed", channel=self.channel, error=error.detail)
        log_business_event("provider_call_failed", channel=self.channel, error=error.detail)
        return AdapterResult.failure(error)

    async def send_or_raise(self, request: Any) -> Optional[str]:
        """Variant used by the proxy endpoints; raises the typed error."""
        result = await self.send(request)
        return result.unwrap()
