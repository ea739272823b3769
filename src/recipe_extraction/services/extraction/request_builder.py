"""Extraction request assembly.

Combines the recipe instruction, the windowed page text and any metadata
hints into one provider-agnostic ``ExtractionRequest``. Provider-specific
payload shaping happens later, inside the selected model client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from recipe_extraction.core.config import get_settings
from recipe_extraction.llm.client import model_name_for
from recipe_extraction.llm.models import ExtractionRequest
from recipe_extraction.llm.prompts import RecipeExtractionPrompt
from recipe_extraction.services.acquisition.models import CaptionOrigin
from recipe_extraction.services.extraction.windowing import select_recipe_window


if TYPE_CHECKING:
    from recipe_extraction.core.config import Provider, Settings
    from recipe_extraction.services.acquisition.models import AcquiredContent


class ExtractionRequestBuilder:
    """Builds immutable extraction requests for either provider."""

    def __init__(
        self,
        settings: Settings | None = None,
        prompt: RecipeExtractionPrompt | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._prompt = prompt or RecipeExtractionPrompt()

    def build_for_content(
        self,
        url: str,
        acquired: AcquiredContent,
        provider: Provider,
    ) -> ExtractionRequest:
        """Build a text request from acquired page content.

        Args:
            url: Source URL, included as a header for the model.
            acquired: Content and hints from the acquisition ladder.
            provider: Backend that will run the request.

        Returns:
            ExtractionRequest carrying ``content_window``.
        """
        extraction = self._settings.extraction
        page_text = (
            select_recipe_window(
                acquired.raw_text,
                max_chars=extraction.max_window_chars,
                lead_in_chars=extraction.lead_in_chars,
            )
            if acquired.raw_text
            else None
        )

        content = self._prompt.format(
            url=url,
            page_text=page_text,
            social_caption=acquired.social_caption,
            social_title=acquired.social_title,
            caption_from_platform=acquired.caption_origin is CaptionOrigin.PLATFORM,
            candidate_image_url=acquired.candidate_image_url,
        )

        return ExtractionRequest(
            prompt=self._prompt.system_prompt,
            content_window=content,
            provider=provider,
            model=model_name_for(provider, self._settings),
        )

    def build_for_image(self, image_base64: str, provider: Provider) -> ExtractionRequest:
        """Build an image request for a photographed recipe card.

        Raises:
            ValueError: If ``image_base64`` is empty.
        """
        if not image_base64:
            msg = "image_base64 must not be empty"
            raise ValueError(msg)

        return ExtractionRequest(
            prompt=self._prompt.system_prompt,
            image_base64=image_base64,
            provider=provider,
            model=model_name_for(provider, self._settings),
        )
