"""Main FastAPI application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from infrastructure.config import settings
from infrastructure.feishu.drive_client import FeishuDriveClient
from infrastructure.logging import setup_logging
from interfaces.api.middleware import (
    envelope_http_exception_handler,
    envelope_unhandled_exception_handler,
    envelope_validation_exception_handler,
)
from interfaces.api.routes.contract_routes import router as contract_router
from interfaces.api.routes.upload_routes import router as upload_router
from interfaces.dependencies import get_container

# Configure structured logging
setup_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:  # noqa: ARG001
    """Handle application startup and shutdown."""
    logger.info(
        "app_starting",
        env=settings.app_env,
        blob_base_url=settings.blob_base_url,
        contract_document_source=settings.contract_document_source,
    )
    logger.info("app_ready")

    yield

    # Cleanup
    logger.info("app_shutting_down")
    if settings.contract_document_source == "feishu":
        await get_container()[FeishuDriveClient].aclose()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Contract template and document storage API",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure properly for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Errors are rendered as {"success": false, "error": ...}
    app.add_exception_handler(StarletteHTTPException, envelope_http_exception_handler)
    app.add_exception_handler(RequestValidationError, envelope_validation_exception_handler)
    app.add_exception_handler(Exception, envelope_unhandled_exception_handler)

    # Include routers
    app.include_router(upload_router)
    app.include_router(contract_router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


# Create app instance
app = create_app()
