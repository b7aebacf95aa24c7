"""
Health check endpoints for the Borrower Outreach Chat service.
"""
import time
from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from app.config import settings
from app.core.dependencies import (
    get_borrower_directory,
    get_chat_adapter,
    get_email_adapter,
    get_whatsapp_adapter,
)
from app.core.logging import get_logger
from app.services.ai_service import AIChatAdapter
from app.services.borrower_directory import BorrowerDirectory
from app.services.email_service import EmailAdapter
from app.services.whatsapp_service import WhatsAppAdapter

router = APIRouter()
logger = get_logger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    uptime_seconds: float
    timestamp: datetime
    service_name: str


class DetailedHealthResponse(HealthResponse):
    """Detailed health check response model."""

    checks: Dict[str, str]


def _uptime(request: Request) -> float:
    start_time = getattr(request.app.state, "start_time", time.time())
    return time.time() - start_time


def _configured(adapter) -> str:
    return "configured" if all(adapter.credentials().values()) else "not_configured"


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """
    Basic health check endpoint.

    Returns service status, version, and uptime.
    """
    response = HealthResponse(
        status="healthy",
        version=settings.version,
        uptime_seconds=_uptime(request),
        timestamp=datetime.now(timezone.utc),
        service_name=settings.app_name,
    )

    logger.info("Health check completed", status=response.status, uptime_seconds=response.uptime_seconds)
    return response


@router.get("/health/detailed", response_model=DetailedHealthResponse)
async def detailed_health_check(
    request: Request,
    directory: BorrowerDirectory = Depends(get_borrower_directory),
    chat_adapter: AIChatAdapter = Depends(get_chat_adapter),
    whatsapp_adapter: WhatsAppAdapter = Depends(get_whatsapp_adapter),
    email_adapter: EmailAdapter = Depends(get_email_adapter),
):
    """
    Detailed health check.

    Reports the borrower directory and whether each provider has the
    credentials it needs. Missing credentials do not make the service
    unhealthy; they only fail calls on that channel.
    """
    checks = {
        "borrower_directory": "healthy" if len(directory) > 0 else "empty",
        "openai": _configured(chat_adapter),
        "whatsapp": _configured(whatsapp_adapter),
        "email": _configured(email_adapter),
    }

    overall_status = "healthy" if checks["borrower_directory"] == "healthy" else "unhealthy"

    response = DetailedHealthResponse(
        status=overall_status,
        version=settings.version,
        uptime_seconds=_uptime(request),
        timestamp=datetime.now(timezone.utc),
        service_name=settings.app_name,
        checks=checks,
    )

    logger.info("Detailed health check completed", status=response.status, checks=checks)
    return response
