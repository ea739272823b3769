"""Model output parsing and normalization."""

from recipe_extraction.parsing.exceptions import (
    EmptyResponseError,
    MalformedResponseError,
    RecipeParsingError,
)
from recipe_extraction.parsing.normalizer import (
    NormalizationResult,
    RecipeNormalizer,
    is_unreliable_image_url,
    normalize_recipe,
)


__all__ = [
    "EmptyResponseError",
    "MalformedResponseError",
    "NormalizationResult",
    "RecipeNormalizer",
    "RecipeParsingError",
    "is_unreliable_image_url",
    "normalize_recipe",
]
