"""Model provider request/response models.

``ExtractionRequest`` is the provider-agnostic payload handed to a model
client. The Gemini and OpenAI models describe only the parts of each wire
format that the clients read; unknown fields are ignored.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from recipe_extraction.core.config import Provider


class ExtractionRequest(BaseModel):
    """A single, immutable request to extract a recipe.

    Exactly one of ``content_window`` or ``image_base64`` is set. Building a
    request with neither or both is a programming error and fails fast.
    """

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., min_length=1, description="System instruction")
    content_window: str | None = Field(
        default=None, description="Windowed page text plus metadata hints"
    )
    image_base64: str | None = Field(
        default=None, description="Base64-encoded photo of a recipe card"
    )
    provider: Provider = Field(..., description="Backend that will run the request")
    model: str = Field(..., min_length=1, description="Provider model name")

    @model_validator(mode="after")
    def _exactly_one_input(self) -> ExtractionRequest:
        has_text = bool(self.content_window)
        has_image = bool(self.image_base64)
        if has_text == has_image:
            msg = (
                "ExtractionRequest needs exactly one of content_window or "
                "image_base64"
            )
            raise ValueError(msg)
        return self

    @property
    def is_image(self) -> bool:
        """Whether this request carries image bytes instead of text."""
        return self.image_base64 is not None


class LLMCompletionResult(BaseModel):
    """Raw text returned by a provider, claimed to be JSON."""

    model_config = ConfigDict(frozen=True)

    raw_response: str = Field(..., description="Raw text response from the model")
    model: str = Field(..., description="Model that generated the response")
    provider: Provider = Field(..., description="Backend that served the request")
    prompt_tokens: int | None = Field(default=None, description="Input token count")
    completion_tokens: int | None = Field(
        default=None, description="Output token count"
    )


# =============================================================================
# Gemini generateContent models
# =============================================================================


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GeminiPart(_Lenient):
    """One content part of a Gemini candidate."""

    text: str | None = None


class GeminiContent(_Lenient):
    """Content block of a Gemini candidate."""

    parts: list[GeminiPart] = Field(default_factory=list)


class GeminiCandidate(_Lenient):
    """Single candidate in a Gemini response."""

    content: GeminiContent | None = None
    finish_reason: str | None = Field(default=None, alias="finishReason")


class GeminiUsage(_Lenient):
    """Token usage reported by Gemini."""

    prompt_token_count: int | None = Field(default=None, alias="promptTokenCount")
    candidates_token_count: int | None = Field(
        default=None, alias="candidatesTokenCount"
    )


class GeminiGenerateResponse(_Lenient):
    """Response from the Gemini ``:generateContent`` endpoint."""

    candidates: list[GeminiCandidate] = Field(default_factory=list)
    usage_metadata: GeminiUsage | None = Field(default=None, alias="usageMetadata")
    model_version: str | None = Field(default=None, alias="modelVersion")


# =============================================================================
# OpenAI chat completions models
# =============================================================================


class OpenAIMessage(_Lenient):
    """Assistant message in an OpenAI choice."""

    role: str = "assistant"
    content: str | None = None


class OpenAIChoice(_Lenient):
    """Single choice in an OpenAI response."""

    index: int = 0
    message: OpenAIMessage = Field(default_factory=OpenAIMessage)
    finish_reason: str | None = None


class OpenAIUsage(_Lenient):
    """Token usage reported by OpenAI."""

    prompt_tokens: int | None = None
    completion_tokens: int | None = None


class OpenAIChatResponse(_Lenient):
    """Response from the OpenAI ``/chat/completions`` endpoint."""

    model: str | None = None
    choices: list[OpenAIChoice] = Field(default_factory=list)
    usage: OpenAIUsage | None = None


JsonPayload = dict[str, Any]
