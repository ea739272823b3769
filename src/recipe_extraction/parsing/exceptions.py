"""Parsing exceptions.

This module defines exceptions raised while normalizing raw model output
into an ``ExtractedRecipe``. Recoverable malformation never raises; only
text that cannot be read as a recipe at all ends up here.
"""

from __future__ import annotations

from typing import ClassVar


# Length of the raw-text excerpt kept on MalformedResponseError
EXCERPT_LENGTH = 300


class RecipeParsingError(Exception):
    """Base exception for recipe parsing errors."""

    user_message: ClassVar[str] = "Could not understand this page."


class MalformedResponseError(RecipeParsingError):
    """Raised when model text is not JSON, even after repair.

    Carries the first characters of the raw text for diagnosis.
    """

    def __init__(self, message: str, *, raw_text: str) -> None:
        super().__init__(message)
        self.excerpt = raw_text[:EXCERPT_LENGTH]


class EmptyResponseError(RecipeParsingError):
    """Raised when the parsed value holds no usable recipe.

    Covers empty arrays, empty objects and JSON scalars.
    """

    user_message: ClassVar[str] = "No recipe was found in this content."
