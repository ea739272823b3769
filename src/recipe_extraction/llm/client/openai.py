"""HTTP client for OpenAI chat completions.

Uses JSON mode via ``response_format``. Images are sent as a base64 data
URL in an ``image_url`` content part.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from recipe_extraction.core.config import Provider
from recipe_extraction.llm.client.base import BaseModelClient
from recipe_extraction.llm.exceptions import LLMEmptyResponseError
from recipe_extraction.llm.models import LLMCompletionResult, OpenAIChatResponse


if TYPE_CHECKING:
    from recipe_extraction.llm.models import ExtractionRequest


class OpenAIClient(BaseModelClient):
    """Async client for the OpenAI chat completions API."""

    provider = Provider.OPENAI

    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        temperature: float = 0.1,
        max_tokens: int | None = None,
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
        self.max_tokens = max_tokens

    @property
    def chat_url(self) -> str:
        """Get the chat completions endpoint URL."""
        return f"{self.base_url}/chat/completions"

    def default_headers(self) -> dict[str, str]:
        """Attach the bearer token."""
        return {**super().default_headers(), "Authorization": f"Bearer {self.api_key}"}

    def endpoint_url(self, request: ExtractionRequest) -> str:  # noqa: ARG002
        """All models share the chat completions endpoint."""
        return self.chat_url

    def build_payload(self, request: ExtractionRequest) -> dict[str, Any]:
        """Shape the request as a system + user chat exchange."""
        user_message: dict[str, Any]
        if request.image_base64 is not None:
            user_message = {
                "role": "user",
                "content": [
                    {"type": "text", "text": "Extract the recipe from this image:"},
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": f"data:image/jpeg;base64,{request.image_base64}"
                        },
                    },
                ],
            }
        else:
            user_message = {
                "role": "user",
                "content": (
                    "Please extract the recipe from the following text and "
                    f"metadata:\n\n{request.content_window}"
                ),
            }

        payload: dict[str, Any] = {
            "model": request.model,
            "response_format": {"type": "json_object"},
            "temperature": self.temperature,
            "messages": [
                {"role": "system", "content": request.prompt},
                user_message,
            ],
        }
        if self.max_tokens is not None:
            payload["max_tokens"] = self.max_tokens
        return payload

    def parse_raw_response(self, data: dict[str, Any]) -> LLMCompletionResult:
        """Read ``choices[0].message.content``.

        Raises:
            LLMEmptyResponseError: If the first choice has no content.
        """
        try:
            response = OpenAIChatResponse.model_validate(data)
        except ValidationError as e:
            msg = "OpenAI response did not match the expected shape"
            raise LLMEmptyResponseError(msg, body=str(data)[:2000]) from e

        text = response.choices[0].message.content if response.choices else None
        if not text or not text.strip():
            msg = "Empty response from OpenAI"
            raise LLMEmptyResponseError(msg, status_code=200, body=str(data)[:2000])

        usage = response.usage
        return LLMCompletionResult(
            raw_response=text,
            model=response.model or self.model,
            provider=self.provider,
            prompt_tokens=usage.prompt_tokens if usage else None,
            completion_tokens=usage.completion_tokens if usage else None,
        )
