"""FastAPI dependencies for service access.

Services are initialized during application startup and stored in
app.state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

from recipe_extraction.core.exceptions import ServiceUnavailableException


if TYPE_CHECKING:
    from recipe_extraction.services.extraction import RecipeExtractionService


async def get_extraction_service(request: Request) -> RecipeExtractionService:
    """Get the recipe extraction service from app state.

    Args:
        request: The incoming request.

    Returns:
        Initialized RecipeExtractionService.

    Raises:
        ServiceUnavailableException: 503 if the service is not initialized.
    """
    service: RecipeExtractionService | None = getattr(
        request.app.state, "extraction_service", None
    )
    if service is None:
        msg = "Recipe extraction service not available"
        raise ServiceUnavailableException(msg)
    return service
