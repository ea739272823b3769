"""Extracted recipe schemas.

``ExtractedRecipe`` is the pipeline's only output contract. It serializes in
camelCase (``imageUrl``, ``prepTime``, ``stepNumber``) to match what the
mobile client persists.
"""

from __future__ import annotations

from pydantic import Field

from .base import APIResponse


PLACEHOLDER_TITLE = "Untitled Recipe"
DEFAULT_SERVINGS = 4


class ExtractedIngredient(APIResponse):
    """One ingredient line, in extraction order."""

    text: str = Field(..., description="Full ingredient line, e.g. '2 cups flour'")
    quantity: str | None = Field(
        default=None, description="Amount as written, e.g. '1 1/2'"
    )
    unit: str | None = Field(default=None, description="Unit, e.g. 'cup', 'g'")
    name: str = Field(..., min_length=1, description="Ingredient name, e.g. 'flour'")


class ExtractedStep(APIResponse):
    """One instruction step."""

    text: str = Field(..., min_length=1, description="Full step instruction")
    step_number: int = Field(..., ge=1, description="1-based step number")


class ExtractedRecipe(APIResponse):
    """Validated recipe produced by the extraction pipeline."""

    title: str = Field(PLACEHOLDER_TITLE, min_length=1, description="Recipe title")
    description: str | None = Field(default=None, description="Short description")
    image_url: str | None = Field(default=None, description="Finished-dish photo URL")
    image_url_unreliable: bool = Field(
        default=False,
        description=(
            "Image is served by a CDN that usually needs session cookies; "
            "treat as best-effort"
        ),
    )
    servings: int = Field(DEFAULT_SERVINGS, ge=1, description="Number of servings")
    prep_time: str | None = Field(default=None, description="Free text, e.g. '15 min'")
    cook_time: str | None = Field(default=None, description="Free text, e.g. '30 min'")
    ingredients: list[ExtractedIngredient] = Field(default_factory=list)
    steps: list[ExtractedStep] = Field(default_factory=list)
    tags: list[str] | None = Field(
        default=None, description="Category tags, duplicates allowed"
    )
