"""Unit tests for ExtractionRequestBuilder."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from recipe_extraction.core.config import Provider, Settings
from recipe_extraction.llm.models import ExtractionRequest
from recipe_extraction.llm.prompts import RecipeExtractionPrompt
from recipe_extraction.services.acquisition.models import (
    AcquiredContent,
    CaptionOrigin,
)
from recipe_extraction.services.extraction.request_builder import (
    ExtractionRequestBuilder,
)


pytestmark = pytest.mark.unit

URL = "https://example.com/tomato-soup"


@pytest.fixture
def builder(settings: Settings) -> ExtractionRequestBuilder:
    """Create a builder with test settings."""
    return ExtractionRequestBuilder(settings)


class TestBuildForContent:
    """Tests for text requests."""

    def test_builds_text_request(
        self,
        builder: ExtractionRequestBuilder,
        acquired_page: AcquiredContent,
    ) -> None:
        """Should carry the instruction and the assembled content."""
        request = builder.build_for_content(URL, acquired_page, Provider.GEMINI)

        assert request.prompt == RecipeExtractionPrompt.system_prompt
        assert request.image_base64 is None
        assert request.is_image is False
        assert request.provider == Provider.GEMINI
        assert request.model == "gemini-2.5-flash"
        assert request.content_window is not None
        assert request.content_window.startswith(f"Target URL: {URL}")
        assert acquired_page.raw_text in request.content_window
        assert "IMPORTANT" in request.content_window
        assert "https://example.com/soup.jpg" in request.content_window

    def test_openai_model_selected(
        self,
        builder: ExtractionRequestBuilder,
        acquired_page: AcquiredContent,
    ) -> None:
        """Should use the configured OpenAI model."""
        request = builder.build_for_content(URL, acquired_page, Provider.OPENAI)

        assert request.provider == Provider.OPENAI
        assert request.model == "gpt-4o"

    def test_long_text_is_windowed(self, settings: Settings) -> None:
        """Should pass only the windowed page text to the model."""
        settings.extraction.max_window_chars = 100
        settings.extraction.lead_in_chars = 10
        builder = ExtractionRequestBuilder(settings)
        raw = "n" * 500 + "Ingredients: eggs" + "t" * 500
        acquired = AcquiredContent(raw_text=raw, scrape_succeeded=True)

        request = builder.build_for_content(URL, acquired, Provider.GEMINI)

        assert request.content_window is not None
        assert raw[490:600] in request.content_window
        assert raw[:480] not in request.content_window

    def test_degraded_content_uses_caption_hints(
        self, builder: ExtractionRequestBuilder
    ) -> None:
        """Should note missing page text and include the caption."""
        acquired = AcquiredContent(
            social_caption="Best pancakes: 2 eggs, 1 cup flour",
            social_title="Pancakes!",
            caption_origin=CaptionOrigin.OPEN_GRAPH,
        )

        request = builder.build_for_content(URL, acquired, Provider.GEMINI)

        assert request.content_window is not None
        assert "could not be directly extracted" in request.content_window
        assert "--- Social Media Metadata / Caption ---" in request.content_window
        assert "Title: Pancakes!" in request.content_window
        assert "IMPORTANT" not in request.content_window

    def test_platform_caption_heading(self, builder: ExtractionRequestBuilder) -> None:
        """Should label platform captions as video captions."""
        acquired = AcquiredContent(
            social_caption="Garlic noodles #recipe",
            caption_origin=CaptionOrigin.PLATFORM,
            candidate_image_url="https://p16.tiktokcdn.com/cover.jpg",
            scrape_succeeded=True,
        )

        request = builder.build_for_content(URL, acquired, Provider.OPENAI)

        assert request.content_window is not None
        assert "--- TikTok Video Caption ---\nCaption: Garlic noodles" in (
            request.content_window
        )


class TestBuildForImage:
    """Tests for image requests."""

    def test_builds_image_request(self, builder: ExtractionRequestBuilder) -> None:
        """Should carry image bytes and no text."""
        request = builder.build_for_image("aGVsbG8=", Provider.OPENAI)

        assert request.is_image is True
        assert request.image_base64 == "aGVsbG8="
        assert request.content_window is None
        assert request.model == "gpt-4o"

    def test_empty_image_fails_fast(self, builder: ExtractionRequestBuilder) -> None:
        """Should refuse to build a request with neither input."""
        with pytest.raises(ValueError, match="must not be empty"):
            builder.build_for_image("", Provider.GEMINI)


class TestExtractionRequestInvariant:
    """Exactly one of text or image is present."""

    def test_neither_input_rejected(self) -> None:
        """Should fail fast when both inputs are missing."""
        with pytest.raises(ValidationError, match="exactly one"):
            ExtractionRequest(prompt="p", provider=Provider.GEMINI, model="m")

    def test_both_inputs_rejected(self) -> None:
        """Should fail fast when both inputs are present."""
        with pytest.raises(ValidationError, match="exactly one"):
            ExtractionRequest(
                prompt="p",
                content_window="text",
                image_base64="aGVsbG8=",
                provider=Provider.GEMINI,
                model="m",
            )

    def test_request_is_immutable(self) -> None:
        """Should reject mutation after construction."""
        request = ExtractionRequest(
            prompt="p", content_window="text", provider=Provider.GEMINI, model="m"
        )

        with pytest.raises(ValidationError):
            request.content_window = "other"  # type: ignore[misc]
