"""Base class for model prompts.

Provides a standardized interface for defining prompts with:
- A system instruction
- A documented output schema
- A ``format`` method assembling the user content
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class BasePrompt(ABC, Generic[T]):
    """Base class for all prompts.

    Centralizes prompt text so it is versioned and testable rather than
    scattered through the pipeline.

    Example:
        ```python
        class RecipeExtractionPrompt(BasePrompt[ExtractedRecipe]):
            output_schema = ExtractedRecipe
            system_prompt = "You are an expert recipe extractor."

            def format(self, **kwargs: Any) -> str:
                return f"Target URL: {kwargs['url']}"
        ```
    """

    output_schema: ClassVar[type[BaseModel]]
    """Pydantic model the model output is normalized into."""

    system_prompt: ClassVar[str]
    """Instruction sent as the system prompt."""

    @abstractmethod
    def format(self, **kwargs: Any) -> str:
        """Format the user content from input variables.

        Raises:
            ValueError: If required variables are missing.
        """
        ...

    @property
    def name(self) -> str:
        """Prompt identifier for logging."""
        return self.__class__.__name__
