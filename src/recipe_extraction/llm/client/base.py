"""Shared HTTP plumbing for model clients.

Subclasses only shape payloads and read responses; sending, throttling and
error translation live here so both providers fail the same way.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import httpx
from aiolimiter import AsyncLimiter

from recipe_extraction.llm.exceptions import (
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from recipe_extraction.observability.logging import get_logger


if TYPE_CHECKING:
    from recipe_extraction.core.config import Provider
    from recipe_extraction.llm.models import ExtractionRequest, LLMCompletionResult


logger = get_logger(__name__)

# Upstream bodies are kept on errors for diagnosis, capped to keep logs sane
_ERROR_BODY_LIMIT = 2000


class BaseModelClient(ABC):
    """Async HTTP client base for a single model provider.

    Model calls are never retried here; a failure is surfaced to the
    caller, who decides whether to try again.

    Attributes:
        api_key: Provider credential.
        model: Default model name.
        base_url: Provider API base URL.
        timeout: HTTP request timeout in seconds.
    """

    provider: Provider

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        timeout: float = 60.0,
        temperature: float = 0.1,
        requests_per_minute: float = 60.0,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.temperature = temperature
        self._http_client: httpx.AsyncClient | None = None
        # 1 request per (60/rpm) seconds, no initial burst
        self._rate_limiter = AsyncLimiter(1, 60.0 / requests_per_minute)

    async def initialize(self) -> None:
        """Initialize the HTTP client. Safe to call more than once."""
        if self._http_client is not None:
            return

        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers=self.default_headers(),
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
        )
        logger.info(
            "Model client initialized",
            provider=str(self.provider),
            model=self.model,
            timeout=self.timeout,
        )

    async def shutdown(self) -> None:
        """Close the HTTP client and release connections."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            logger.debug("Model client shutdown", provider=str(self.provider))

    def default_headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        return {"Content-Type": "application/json"}

    @abstractmethod
    def endpoint_url(self, request: ExtractionRequest) -> str:
        """URL the request is posted to."""

    @abstractmethod
    def build_payload(self, request: ExtractionRequest) -> dict[str, Any]:
        """Build the provider-specific request body."""

    @abstractmethod
    def parse_raw_response(self, data: dict[str, Any]) -> LLMCompletionResult:
        """Extract generated text from the provider response body."""

    async def complete(self, request: ExtractionRequest) -> LLMCompletionResult:
        """Send an extraction request and return the raw model text.

        Raises:
            LLMUnavailableError: If the provider cannot be reached.
            LLMTimeoutError: If the request times out.
            LLMRateLimitError: If the provider answers 429.
            LLMResponseError: If the provider answers any other non-2xx.
            LLMEmptyResponseError: If the response has no text.
        """
        if self._http_client is None:
            await self.initialize()
        assert self._http_client is not None

        payload = self.build_payload(request)
        await self._rate_limiter.acquire()

        try:
            response = await self._http_client.post(
                self.endpoint_url(request),
                json=payload,
            )
        except httpx.TimeoutException as e:
            logger.warning(
                "Model request timed out",
                provider=str(self.provider),
                timeout=self.timeout,
            )
            msg = f"{self.provider} timed out after {self.timeout}s"
            raise LLMTimeoutError(msg) from e
        except httpx.RequestError as e:
            logger.warning(
                "Model connection error",
                provider=str(self.provider),
                error=str(e),
            )
            msg = f"Cannot connect to {self.provider}: {e}"
            raise LLMUnavailableError(msg) from e

        if response.status_code >= 400:
            body = response.text[:_ERROR_BODY_LIMIT]
            logger.error(
                "Model request failed",
                provider=str(self.provider),
                status_code=response.status_code,
                body=body[:300],
            )
            error_cls = (
                LLMRateLimitError if response.status_code == 429 else LLMResponseError
            )
            msg = f"{self.provider} returned {response.status_code}"
            raise error_cls(msg, status_code=response.status_code, body=body)

        try:
            data = response.json()
        except ValueError as e:
            body = response.text[:_ERROR_BODY_LIMIT]
            msg = f"{self.provider} returned a non-JSON envelope"
            raise LLMResponseError(
                msg, status_code=response.status_code, body=body
            ) from e

        result = self.parse_raw_response(data)
        logger.debug(
            "Model request completed",
            provider=str(self.provider),
            model=result.model,
            completion_tokens=result.completion_tokens,
            is_image=request.is_image,
        )
        return result
