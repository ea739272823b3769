"""Recipe extraction prompt.

The system instruction is a schema contract: it lists every output field,
requires empty arrays instead of missing keys, forbids truncating long
ingredient or step lists, and tells the model how to pick the image.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel

from recipe_extraction.schemas.recipe import ExtractedRecipe

from .base import BasePrompt


PLATFORM_CAPTION_HEADING = "--- TikTok Video Caption ---"
SOCIAL_METADATA_HEADING = "--- Social Media Metadata / Caption ---"
CONTENT_UNAVAILABLE_NOTE = (
    "(Webpage content could not be directly extracted due to bot protections. "
    "Rely on the social metadata below if available.)"
)


class RecipeExtractionPrompt(BasePrompt[ExtractedRecipe]):
    """Prompt for turning page text, captions or a photo into a recipe.

    Example output:
        {
            "title": "Tomato Soup",
            "servings": 4,
            "prepTime": "10 min",
            "cookTime": "25 min",
            "ingredients": [
                {"text": "2 cups tomatoes", "quantity": "2", "unit": "cups",
                 "name": "tomatoes"}
            ],
            "steps": [{"text": "Simmer for 20 minutes.", "stepNumber": 1}],
            "tags": ["vegetarian"]
        }
    """

    output_schema: ClassVar[type[BaseModel]] = ExtractedRecipe

    system_prompt: ClassVar[str] = """You are an expert recipe extractor. Extract the recipe from the provided webpage content, social media metadata, or image.
You MUST respond with a single JSON object with exactly these fields:

{
  "title": string,                 // recipe title
  "description": string | null,    // one or two sentence summary
  "imageUrl": string | null,       // photo of the finished dish, see image rules
  "servings": number,              // whole number of servings, 4 if unknown
  "prepTime": string | null,       // as written, e.g. "15 min"
  "cookTime": string | null,       // as written, e.g. "30 min"
  "ingredients": [
    {
      "text": string,              // full ingredient line as written
      "quantity": string | null,   // number as string, e.g. "1", "0.5", "1 1/2"
      "unit": string | null,       // e.g. "cup", "tbsp", "g", "ml"
      "name": string               // e.g. "flour", "sugar"
    }
  ],
  "steps": [
    {
      "text": string,              // full step instruction
      "stepNumber": number         // 1-based position
    }
  ],
  "tags": string[]                 // e.g. "vegetarian", "dessert", "quick"
}

Rules you MUST follow:
- Always include every field. If no ingredients or steps are found, return an empty array ([]) for that field. Never omit "ingredients" or "steps".
- Be complete. Include EVERY ingredient and EVERY step from the source, in the original order. Never truncate, summarize, merge or abbreviate long lists, and never end a list with "etc." or "...".
- If a string field is unknown, use null. If servings is unknown, use 4.
- Parse quantities and units out of each ingredient line, but keep the original line in "text".
- Output raw JSON only, without markdown code fences or commentary.
- For "imageUrl", critically analyze all image URLs in the content. Select the URL that MOST clearly shows the finished food dish or recipe result. DO NOT select profile pictures, logos, avatars, or images of people.
- If an IMPORTANT note supplies a thumbnail image URL, you MUST use that URL as "imageUrl" whenever you cannot identify a better food photo in the content. Use it exactly as provided.
- If no food image can be identified and no thumbnail is supplied, return null for "imageUrl"."""

    def format(self, **kwargs: Any) -> str:
        """Assemble the user content for a URL extraction.

        Args:
            **kwargs: ``url`` (required), ``page_text``, ``social_caption``,
                ``social_title``, ``caption_from_platform`` and
                ``candidate_image_url``.

        Returns:
            Content string with the page text first, then metadata hints.

        Raises:
            ValueError: If ``url`` is missing.
        """
        url = kwargs.get("url")
        if not url:
            msg = "Missing required 'url' argument"
            raise ValueError(msg)

        page_text: str | None = kwargs.get("page_text")
        social_caption: str | None = kwargs.get("social_caption")
        social_title: str | None = kwargs.get("social_title")
        candidate_image_url: str | None = kwargs.get("candidate_image_url")

        sections = [f"Target URL: {url}"]

        if page_text:
            sections.append(f"Rendered webpage content:\n\n{page_text}")
        else:
            sections.append(CONTENT_UNAVAILABLE_NOTE)

        if social_caption:
            if kwargs.get("caption_from_platform"):
                sections.append(f"{PLATFORM_CAPTION_HEADING}\nCaption: {social_caption}")
            else:
                sections.append(
                    f"{SOCIAL_METADATA_HEADING}\n"
                    f"Title: {social_title or 'Unknown'}\n"
                    f"Caption: {social_caption}"
                )

        if candidate_image_url:
            sections.append(
                "IMPORTANT: The original webpage's designated thumbnail image is: "
                f"{candidate_image_url}. If you cannot find a better photo of the "
                "finished dish in the text above, you MUST use this URL as the "
                "`imageUrl`. Note: if it is a video thumbnail with a play button, "
                "that is perfectly fine. DO NOT attempt to remove the play button "
                "or alter the URL. Use the URL exactly as provided."
            )

        return "\n\n".join(sections)
