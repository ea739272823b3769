"""Shared test fixtures and configuration for the recipe extraction tests.

Settings are loaded with ``APP_ENV=test`` so metrics and telemetry are off
and logging stays quiet. Provider credentials are always fake.
"""

from __future__ import annotations

import os


os.environ["APP_ENV"] = "test"
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")

from collections.abc import Iterator  # noqa: E402

import pytest  # noqa: E402

from recipe_extraction.core.config import Settings, get_settings  # noqa: E402
from recipe_extraction.services.acquisition.models import (  # noqa: E402
    AcquiredContent,
    AcquisitionStrategy,
)


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Iterator[None]:
    """Drop cached settings so environment patches take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings for the test environment with fake credentials."""
    return Settings(GEMINI_API_KEY="test-gemini-key", OPENAI_API_KEY="test-openai-key")


@pytest.fixture
def acquired_page() -> AcquiredContent:
    """Content from a successful reader fetch with hints."""
    return AcquiredContent(
        raw_text=(
            "Grandma's Tomato Soup. A cozy weeknight soup.\n"
            "Ingredients\n2 cups tomatoes\n1 tsp salt\n"
            "Instructions\n1. Simmer the tomatoes.\n2. Season with salt."
        ),
        candidate_image_url="https://example.com/soup.jpg",
        social_caption=None,
        strategy=AcquisitionStrategy.READER,
        scrape_succeeded=True,
    )


@pytest.fixture
def recipe_json() -> str:
    """A complete, well-formed model response."""
    return (
        '{"title": "Tomato Soup", "description": "Cozy soup", '
        '"imageUrl": "https://example.com/soup.jpg", "servings": 2, '
        '"prepTime": "10 min", "cookTime": "25 min", '
        '"ingredients": [{"text": "2 cups tomatoes", "quantity": "2", '
        '"unit": "cups", "name": "tomatoes"}], '
        '"steps": [{"text": "Simmer the tomatoes.", "stepNumber": 1}], '
        '"tags": ["soup", "vegetarian"]}'
    )
