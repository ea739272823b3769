"""Model prompt definitions."""

from .base import BasePrompt
from .recipe_extraction import RecipeExtractionPrompt


__all__ = [
    "BasePrompt",
    "RecipeExtractionPrompt",
]
