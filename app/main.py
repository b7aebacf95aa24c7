"""Main FastAPI application for the Borrower Outreach Chat service."""

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.core.dependencies import get_borrower_directory
from app.core.exceptions import BaseAPIException
from app.core.logging import setup_logging, get_logger
from app.core.middleware import CorrelationIDMiddleware
from app.api.borrowers import router as borrowers_router
from app.api.channels import router as channels_router
from app.api.conversations import router as conversations_router
from app.api.health import router as health_router

# Get settings
settings = get_settings()

# Initialize logging
setup_logging(settings.log_level)
logger = get_logger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Operator chat with an AI collections assistant, fanned out to WhatsApp and email",
    version=settings.version,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(CorrelationIDMiddleware)

# CORS middleware
if settings.enable_cors:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Include API routers
app.include_router(borrowers_router)
app.include_router(channels_router)
app.include_router(conversations_router)
app.include_router(health_router, prefix=settings.api_prefix, tags=["health"])


@app.exception_handler(BaseAPIException)
async def api_exception_handler(request: Request, exc: BaseAPIException):
    """Render typed API errors as ``{"error": ...}`` bodies."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Request failed",
        path=request.url.path,
        status_code=exc.status_code,
        error_code=exc.error_code,
        error=exc.detail,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


@app.on_event("startup")
async def startup_event():
    """Initialize application on startup."""
    app.state.start_time = time.time()
    logger.info("Starting Borrower Outreach Chat", version=settings.version)

    # An unreadable fixture is fatal: DirectoryLoadError aborts startup
    directory = get_borrower_directory()

    logger.info("Service startup complete", borrower_count=len(directory))


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info("Shutting down Borrower Outreach Chat")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
