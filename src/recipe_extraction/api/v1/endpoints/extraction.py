"""Recipe extraction endpoints.

Both endpoints return an ``ExtractedRecipe`` or a structured error. Every
fatal pipeline error maps to its own error code, but callers are expected
to offer the same retry action for all of them.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from recipe_extraction.api.dependencies import get_extraction_service
from recipe_extraction.core.config import Provider
from recipe_extraction.schemas.extraction import (
    ExtractFromImageRequest,
    ExtractFromUrlRequest,
)
from recipe_extraction.schemas.recipe import ExtractedRecipe
from recipe_extraction.services.extraction import RecipeExtractionService


router = APIRouter(prefix="/extract", tags=["Extraction"])

_ERROR_RESPONSES: dict[int | str, dict[str, str]] = {
    422: {"description": "Unreadable page, no recipe found, or invalid request"},
    502: {"description": "The model provider could not be reached"},
    503: {"description": "Provider credential not configured"},
}


def _provider(value: str | None) -> Provider | None:
    return Provider(value) if value is not None else None


@router.post(
    "/url",
    response_model=ExtractedRecipe,
    summary="Extract a recipe from a URL",
    description=(
        "Acquires the page (platform API, link preview, rendering proxy, and "
        "server-side fallbacks when needed) and extracts a structured recipe."
    ),
    responses=_ERROR_RESPONSES,
)
async def extract_from_url(
    body: ExtractFromUrlRequest,
    service: Annotated[RecipeExtractionService, Depends(get_extraction_service)],
) -> ExtractedRecipe:
    """Extract a recipe from a web page or social post URL."""
    return await service.extract_from_url(
        str(body.url), provider=_provider(body.provider)
    )


@router.post(
    "/image",
    response_model=ExtractedRecipe,
    summary="Extract a recipe from a photo",
    description="Extracts a structured recipe from a photographed recipe card.",
    responses=_ERROR_RESPONSES,
)
async def extract_from_image(
    body: ExtractFromImageRequest,
    service: Annotated[RecipeExtractionService, Depends(get_extraction_service)],
) -> ExtractedRecipe:
    """Extract a recipe from a base64-encoded image."""
    return await service.extract_from_image(
        body.image_base64, provider=_provider(body.provider)
    )
