"""Application lifespan event handlers.

This module defines the lifespan context manager that handles:
- Startup: configure logging, build the acquirer and extraction service
- Shutdown: close HTTP clients and flush pending telemetry
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from recipe_extraction.core.config import Settings, get_settings
from recipe_extraction.observability.logging import get_logger, setup_logging
from recipe_extraction.services.acquisition import ContentAcquirer
from recipe_extraction.services.extraction import RecipeExtractionService


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI


logger = get_logger(__name__)


async def _startup(app: FastAPI, settings: Settings) -> None:
    """Initialize application services.

    Args:
        app: The FastAPI application instance.
        settings: Application settings.
    """
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
    )
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        default_provider=str(settings.llm.default_provider),
    )

    acquirer = ContentAcquirer(settings.acquisition)
    await acquirer.initialize()
    app.state.content_acquirer = acquirer
    app.state.extraction_service = RecipeExtractionService(acquirer, settings=settings)

    for provider in ("gemini", "openai"):
        if not getattr(settings, f"{provider.upper()}_API_KEY"):
            logger.warning("Provider credential not configured", provider=provider)

    logger.info("Application startup complete")


async def _shutdown(app: FastAPI) -> None:
    """Shutdown application services.

    Args:
        app: The FastAPI application instance.
    """
    logger.info("Shutting down application")

    service = getattr(app.state, "extraction_service", None)
    if service is not None:
        await service.shutdown()
        app.state.extraction_service = None

    acquirer = getattr(app.state, "content_acquirer", None)
    if acquirer is not None:
        await acquirer.shutdown()
        app.state.content_acquirer = None

    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None - control returns to the application to handle requests.
    """
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    await _startup(app, settings)
    try:
        yield
    finally:
        await _shutdown(app)
