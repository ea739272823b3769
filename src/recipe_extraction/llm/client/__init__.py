"""Model client implementations."""

from recipe_extraction.llm.client.base import BaseModelClient
from recipe_extraction.llm.client.factory import (
    api_key_for,
    create_model_client,
    model_name_for,
)
from recipe_extraction.llm.client.gemini import GeminiClient
from recipe_extraction.llm.client.openai import OpenAIClient
from recipe_extraction.llm.client.protocol import ModelClientProtocol


__all__ = [
    "BaseModelClient",
    "GeminiClient",
    "ModelClientProtocol",
    "OpenAIClient",
    "api_key_for",
    "create_model_client",
    "model_name_for",
]
