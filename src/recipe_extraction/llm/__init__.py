"""Model provider integration.

Provides the Gemini and OpenAI clients used to turn page content or a recipe
photo into raw recipe JSON.
"""

from recipe_extraction.llm.client import (
    GeminiClient,
    ModelClientProtocol,
    OpenAIClient,
    create_model_client,
)
from recipe_extraction.llm.exceptions import (
    LLMConfigurationError,
    LLMEmptyResponseError,
    LLMError,
    LLMRateLimitError,
    LLMRequestError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from recipe_extraction.llm.models import ExtractionRequest, LLMCompletionResult


__all__ = [
    "ExtractionRequest",
    "GeminiClient",
    "LLMCompletionResult",
    "LLMConfigurationError",
    "LLMEmptyResponseError",
    "LLMError",
    "LLMRateLimitError",
    "LLMRequestError",
    "LLMResponseError",
    "LLMTimeoutError",
    "LLMUnavailableError",
    "ModelClientProtocol",
    "OpenAIClient",
    "create_model_client",
]
