"""Recipe extraction pipeline."""

from recipe_extraction.services.extraction.models import (
    ExtractionOutcome,
    ExtractionSource,
    ExtractionState,
)
from recipe_extraction.services.extraction.request_builder import (
    ExtractionRequestBuilder,
)
from recipe_extraction.services.extraction.service import RecipeExtractionService
from recipe_extraction.services.extraction.windowing import (
    SECTION_MARKERS,
    select_recipe_window,
)


__all__ = [
    "SECTION_MARKERS",
    "ExtractionOutcome",
    "ExtractionRequestBuilder",
    "ExtractionSource",
    "ExtractionState",
    "RecipeExtractionService",
    "select_recipe_window",
]
