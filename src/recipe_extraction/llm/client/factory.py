"""Model client selection.

The provider switch happens once, here; nothing downstream compares
provider names.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from recipe_extraction.core.config import Provider
from recipe_extraction.llm.client.gemini import GeminiClient
from recipe_extraction.llm.client.openai import OpenAIClient
from recipe_extraction.llm.exceptions import LLMConfigurationError


if TYPE_CHECKING:
    from collections.abc import Callable

    from recipe_extraction.core.config import Settings
    from recipe_extraction.core.config.settings import GeminiSettings, OpenAISettings
    from recipe_extraction.llm.client.base import BaseModelClient


def _build_gemini(settings: Settings, api_key: str) -> BaseModelClient:
    config = settings.llm.gemini
    return GeminiClient(
        api_key=api_key,
        model=config.model,
        base_url=config.url,
        timeout=config.timeout,
        temperature=config.temperature,
        max_output_tokens=config.max_output_tokens,
        requests_per_minute=config.requests_per_minute,
    )


def _build_openai(settings: Settings, api_key: str) -> BaseModelClient:
    config = settings.llm.openai
    return OpenAIClient(
        api_key=api_key,
        model=config.model,
        base_url=config.url,
        timeout=config.timeout,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        requests_per_minute=config.requests_per_minute,
    )


@dataclass(frozen=True, slots=True)
class _ProviderStrategy:
    """Everything that differs between providers."""

    config: Callable[[Settings], GeminiSettings | OpenAISettings]
    api_key: Callable[[Settings], str]
    build: Callable[[Settings, str], BaseModelClient]


_STRATEGIES: dict[Provider, _ProviderStrategy] = {
    Provider.GEMINI: _ProviderStrategy(
        config=lambda settings: settings.llm.gemini,
        api_key=lambda settings: settings.GEMINI_API_KEY,
        build=_build_gemini,
    ),
    Provider.OPENAI: _ProviderStrategy(
        config=lambda settings: settings.llm.openai,
        api_key=lambda settings: settings.OPENAI_API_KEY,
        build=_build_openai,
    ),
}


def model_name_for(provider: Provider, settings: Settings) -> str:
    """Return the configured model name for a provider."""
    return _STRATEGIES[provider].config(settings).model


def api_key_for(provider: Provider, settings: Settings) -> str:
    """Resolve the credential for a provider.

    Returns an empty string when the credential is not configured.
    """
    return _STRATEGIES[provider].api_key(settings)


def create_model_client(provider: Provider, settings: Settings) -> BaseModelClient:
    """Build an uninitialized client for ``provider``.

    Args:
        provider: Selected backend.
        settings: Application settings holding endpoints and credentials.

    Returns:
        A model client for the provider.

    Raises:
        LLMConfigurationError: If the provider's API key is not configured.
    """
    strategy = _STRATEGIES[provider]
    api_key = strategy.api_key(settings)
    if not api_key:
        msg = (
            f"Missing API key for {provider}. Set "
            f"{provider.upper()}_API_KEY in the environment."
        )
        raise LLMConfigurationError(msg)
    return strategy.build(settings, api_key)
