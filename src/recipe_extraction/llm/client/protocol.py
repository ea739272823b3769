"""Model client protocol definition.

Defines the interface both provider backends implement, so the pipeline can
stay provider-agnostic above the payload-shaping layer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable


if TYPE_CHECKING:
    from recipe_extraction.core.config import Provider
    from recipe_extraction.llm.models import ExtractionRequest, LLMCompletionResult


@runtime_checkable
class ModelClientProtocol(Protocol):
    """Protocol for recipe extraction model clients.

    Key methods:
    - build_payload: Shape an ExtractionRequest into the provider's JSON body
    - parse_raw_response: Pull the generated text out of the provider's JSON
    - complete: Send the request and return the raw text
    - initialize/shutdown: Lifecycle management for the HTTP connection pool
    """

    provider: Provider

    async def initialize(self) -> None:
        """Initialize client resources (HTTP connections, etc.)."""
        ...

    async def shutdown(self) -> None:
        """Release client resources."""
        ...

    def build_payload(self, request: ExtractionRequest) -> dict[str, Any]:
        """Build the provider-specific request body.

        Args:
            request: Provider-agnostic extraction request.

        Returns:
            JSON-serializable request body.
        """
        ...

    def parse_raw_response(self, data: dict[str, Any]) -> LLMCompletionResult:
        """Extract the generated text from a provider response body.

        Raises:
            LLMEmptyResponseError: If the response carries no text.
        """
        ...

    async def complete(self, request: ExtractionRequest) -> LLMCompletionResult:
        """Run an extraction request and return raw text claimed to be JSON.

        Raises:
            LLMUnavailableError: Provider unreachable.
            LLMTimeoutError: Request timed out.
            LLMResponseError: Non-2xx response.
            LLMEmptyResponseError: 2xx response without text.
        """
        ...
