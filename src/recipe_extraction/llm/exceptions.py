"""Model provider exceptions.

These exceptions propagate out of the extraction pipeline unchanged and are
converted to HTTP responses by the exception handlers. Each fatal kind
carries a ``user_message`` suitable for showing next to a retry button.
"""

from __future__ import annotations

from typing import ClassVar


class LLMError(Exception):
    """Base exception for model provider errors."""

    user_message: ClassVar[str] = "Recipe extraction failed."


class LLMConfigurationError(LLMError):
    """Raised when the selected provider has no credential configured.

    Fatal and surfaced immediately; retrying cannot help until the
    credential is provided.
    """

    user_message: ClassVar[str] = "Recipe extraction is not configured on this server."


class LLMRequestError(LLMError):
    """Raised when the upstream model call fails.

    Keeps the upstream status and body for diagnosis. Never retried
    automatically; the caller may offer a manual retry.
    """

    user_message: ClassVar[str] = "Could not reach the recipe extraction service."

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class LLMUnavailableError(LLMRequestError):
    """Raised when the provider cannot be reached (connection errors)."""


class LLMTimeoutError(LLMUnavailableError):
    """Raised when a provider request exceeds its timeout."""


class LLMResponseError(LLMRequestError):
    """Raised when the provider answers with a non-2xx status."""


class LLMRateLimitError(LLMResponseError):
    """Raised when the provider rejects the request with HTTP 429."""


class LLMEmptyResponseError(LLMRequestError):
    """Raised when the provider answers 2xx but returns no text."""
