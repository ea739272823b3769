"""API and pipeline schemas."""

from recipe_extraction.schemas.base import APIRequest, APIResponse
from recipe_extraction.schemas.extraction import (
    ExtractFromImageRequest,
    ExtractFromUrlRequest,
)
from recipe_extraction.schemas.recipe import (
    DEFAULT_SERVINGS,
    PLACEHOLDER_TITLE,
    ExtractedIngredient,
    ExtractedRecipe,
    ExtractedStep,
)


__all__ = [
    "DEFAULT_SERVINGS",
    "PLACEHOLDER_TITLE",
    "APIRequest",
    "APIResponse",
    "ExtractFromImageRequest",
    "ExtractFromUrlRequest",
    "ExtractedIngredient",
    "ExtractedRecipe",
    "ExtractedStep",
]
