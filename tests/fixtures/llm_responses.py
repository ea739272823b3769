"""Canned provider responses for testing.

Shapes follow the Gemini ``generateContent`` and OpenAI chat completions
wire formats and can be replayed with respx.
"""

from __future__ import annotations

from typing import Any


def create_gemini_response(
    content: str,
    model: str = "gemini-2.5-flash",
    prompt_tokens: int = 120,
    completion_tokens: int = 80,
    finish_reason: str = "STOP",
) -> dict[str, Any]:
    """Factory for creating mock Gemini generateContent responses."""
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": content}]},
                "finishReason": finish_reason,
                "index": 0,
            }
        ],
        "usageMetadata": {
            "promptTokenCount": prompt_tokens,
            "candidatesTokenCount": completion_tokens,
            "totalTokenCount": prompt_tokens + completion_tokens,
        },
        "modelVersion": model,
    }


def create_openai_response(
    content: str | None,
    model: str = "gpt-4o",
    prompt_tokens: int = 120,
    completion_tokens: int = 80,
) -> dict[str, Any]:
    """Factory for creating mock OpenAI chat completion responses."""
    return {
        "id": "chatcmpl-test123",
        "object": "chat.completion",
        "created": 1705312200,
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
        },
    }


SOUP_RECIPE_JSON = """{
    "title": "Tomato Soup",
    "servings": 4,
    "ingredients": [
        {"text": "2 cups tomatoes", "quantity": "2", "unit": "cups", "name": "tomatoes"}
    ],
    "steps": [{"text": "Simmer for 20 minutes.", "stepNumber": 1}]
}"""

GEMINI_SOUP_RESPONSE: dict[str, Any] = create_gemini_response(SOUP_RECIPE_JSON)

OPENAI_SOUP_RESPONSE: dict[str, Any] = create_openai_response(SOUP_RECIPE_JSON)

GEMINI_SAFETY_BLOCKED_RESPONSE: dict[str, Any] = {
    "candidates": [{"finishReason": "SAFETY", "index": 0}],
    "modelVersion": "gemini-2.5-flash",
}
