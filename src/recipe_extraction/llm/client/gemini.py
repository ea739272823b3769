"""HTTP client for Google Gemini.

Uses the ``generateContent`` endpoint with JSON response mode. Images are
sent as ``inline_data`` parts next to the instruction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from recipe_extraction.core.config import Provider
from recipe_extraction.llm.client.base import BaseModelClient
from recipe_extraction.llm.exceptions import LLMEmptyResponseError
from recipe_extraction.llm.models import GeminiGenerateResponse, LLMCompletionResult


if TYPE_CHECKING:
    from recipe_extraction.llm.models import ExtractionRequest


class GeminiClient(BaseModelClient):
    """Async client for the Gemini generateContent API.

    The API key travels in the ``x-goog-api-key`` header rather than the
    query string so it never shows up in logged URLs.
    """

    provider = Provider.GEMINI

    DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        temperature: float = 0.1,
        max_output_tokens: int = 8192,
        requests_per_minute: float = 60.0,
    ) -> None:
        super().__init__(
            api_key=api_key,
            model=model,
            base_url=base_url,
            timeout=timeout,
            temperature=temperature,
            requests_per_minute=requests_per_minute,
        )
        self.max_output_tokens = max_output_tokens

    def default_headers(self) -> dict[str, str]:
        """Attach the API key header."""
        return {**super().default_headers(), "x-goog-api-key": self.api_key}

    def endpoint_url(self, request: ExtractionRequest) -> str:
        """Build the model-specific generateContent URL."""
        return f"{self.base_url}/models/{request.model}:generateContent"

    def build_payload(self, request: ExtractionRequest) -> dict[str, Any]:
        """Shape the request as a single-turn generateContent body."""
        parts: list[dict[str, Any]]
        if request.image_base64 is not None:
            parts = [
                {"text": request.prompt},
                {
                    "inline_data": {
                        "mime_type": "image/jpeg",
                        "data": request.image_base64,
                    }
                },
            ]
        else:
            parts = [{"text": f"{request.prompt}\n\n---\n\n{request.content_window}"}]

        return {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
                "responseMimeType": "application/json",
            },
        }

    def parse_raw_response(self, data: dict[str, Any]) -> LLMCompletionResult:
        """Read ``candidates[0].content.parts[*].text``.

        Raises:
            LLMEmptyResponseError: If no candidate text is present.
        """
        try:
            response = GeminiGenerateResponse.model_validate(data)
        except ValidationError as e:
            msg = "Gemini response did not match the expected shape"
            raise LLMEmptyResponseError(msg, body=str(data)[:2000]) from e

        text = ""
        if response.candidates and response.candidates[0].content is not None:
            text = "".join(
                part.text
                for part in response.candidates[0].content.parts
                if part.text
            )

        if not text.strip():
            finish_reason = (
                response.candidates[0].finish_reason if response.candidates else None
            )
            msg = f"Empty response from Gemini (finish reason: {finish_reason})"
            raise LLMEmptyResponseError(msg, status_code=200, body=str(data)[:2000])

        usage = response.usage_metadata
        return LLMCompletionResult(
            raw_response=text,
            model=response.model_version or self.model,
            provider=self.provider,
            prompt_tokens=usage.prompt_token_count if usage else None,
            completion_tokens=usage.candidates_token_count if usage else None,
        )
