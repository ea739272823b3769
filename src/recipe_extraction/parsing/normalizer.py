"""Normalization of raw model output into ``ExtractedRecipe``.

Model text is parsed into an untyped JSON tree here and coerced into the
strict schema in one pass. Nothing outside this module ever sees the
untyped tree.

Pipeline:
    1. Strict JSON parse of the trimmed text.
    2. Strip a markdown code fence, parse again, then a lenient repair pass.
    3. Unwrap an array to its first element.
    4. Field coercion with aliases, drop rules and defaults.
    5. Image URL policy (unreliable CDN flag, thumbnail fallback).
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlparse

import orjson
from json_repair import repair_json
from pydantic import BaseModel, ConfigDict, Field

from recipe_extraction.observability.logging import get_logger
from recipe_extraction.parsing.exceptions import (
    EmptyResponseError,
    MalformedResponseError,
)
from recipe_extraction.schemas.recipe import (
    DEFAULT_SERVINGS,
    PLACEHOLDER_TITLE,
    ExtractedIngredient,
    ExtractedRecipe,
    ExtractedStep,
)


logger = get_logger(__name__)

# Tolerates a language tag and a missing closing fence (truncated output)
_FENCE_PATTERN = re.compile(r"```[A-Za-z0-9_-]*[ \t]*\n?(.*?)(?:```|\Z)", re.DOTALL)
_NUMBER_PATTERN = re.compile(r"\d+(?:\.\d+)?")

INGREDIENT_KEYS = ("ingredients", "ingredient")
STEP_KEYS = ("steps", "instructions", "instruction", "method")
STEP_TEXT_KEYS = ("text", "instruction", "description")
IMAGE_KEYS = ("imageUrl", "image_url", "image")

# Hosts that serve images only with the session cookies of the app that
# produced them
UNRELIABLE_IMAGE_HOSTS = (
    "cdninstagram.com",
    "fbcdn.net",
    "tiktokcdn.com",
    "tiktokcdn-us.com",
    "tiktokcdn-eu.com",
    "ibyteimg.com",
    "muscdn.com",
)


class NormalizationResult(BaseModel):
    """A normalized recipe plus the defaults that had to be applied.

    An empty ``defaults_applied`` means the model returned complete data.
    """

    model_config = ConfigDict(frozen=True)

    recipe: ExtractedRecipe
    defaults_applied: list[str] = Field(default_factory=list)


def is_unreliable_image_url(url: str | None) -> bool:
    """Check whether ``url`` is served by a cookie-gated social CDN."""
    if not url:
        return False
    host = (urlparse(url).hostname or "").lower()
    return any(
        host == suffix or host.endswith(f".{suffix}")
        for suffix in UNRELIABLE_IMAGE_HOSTS
    )


class RecipeNormalizer:
    """Turns raw model text into a validated ``ExtractedRecipe``.

    Recoverable problems (fences, trailing commas, unquoted keys, missing
    keys, blank rows) are repaired silently and reported through
    ``NormalizationResult.defaults_applied``. Only text that cannot be read
    at all raises.

    Example:
        ```python
        normalizer = RecipeNormalizer()
        result = normalizer.normalize(raw_text, candidate_image_url=thumb)
        recipe = result.recipe
        ```
    """

    def normalize(
        self,
        raw_text: str,
        *,
        candidate_image_url: str | None = None,
    ) -> NormalizationResult:
        """Normalize raw model text.

        Args:
            raw_text: Text returned by the model, claimed to be JSON.
            candidate_image_url: Thumbnail found during acquisition, used
                when the model returns no image.

        Returns:
            NormalizationResult with the recipe and applied defaults.

        Raises:
            MalformedResponseError: If the text is not JSON even after repair.
            EmptyResponseError: If the JSON holds no recipe object.
        """
        data = self._unwrap(self._parse(raw_text))
        defaults: list[str] = []

        recipe = ExtractedRecipe(
            title=self._title(data, defaults),
            description=_clean_text(data.get("description")),
            servings=self._servings(data, defaults),
            prep_time=_clean_text(_first_present(data, ("prepTime", "prep_time"))),
            cook_time=_clean_text(_first_present(data, ("cookTime", "cook_time"))),
            ingredients=self._ingredients(data, defaults),
            steps=self._steps(data, defaults),
            tags=self._tags(data),
        )
        self._apply_image_policy(recipe, data, candidate_image_url)

        if defaults:
            logger.warning(
                "Recipe normalized with defaults",
                title=recipe.title,
                defaults_applied=defaults,
            )
        else:
            logger.debug(
                "Recipe normalized",
                title=recipe.title,
                ingredients=len(recipe.ingredients),
                steps=len(recipe.steps),
            )

        return NormalizationResult(recipe=recipe, defaults_applied=defaults)

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    def _parse(self, raw_text: str) -> Any:
        # Backticks inside valid JSON strings must not be read as a fence
        try:
            return orjson.loads(raw_text.strip())
        except orjson.JSONDecodeError:
            text = unfence(raw_text)

        try:
            return orjson.loads(text)
        except orjson.JSONDecodeError:
            logger.debug("Strict JSON parse failed, attempting repair")

        try:
            repaired = repair_json(text, return_objects=True)
        except (ValueError, TypeError, RecursionError) as e:
            msg = "Model response is not valid JSON"
            raise MalformedResponseError(msg, raw_text=raw_text) from e

        # The repair pass yields an empty string when it finds no JSON at all
        if not isinstance(repaired, dict | list):
            msg = "Model response is not valid JSON"
            raise MalformedResponseError(msg, raw_text=raw_text)

        logger.info("Repaired malformed JSON in model response")
        return repaired

    def _unwrap(self, parsed: Any) -> dict[str, Any]:
        if isinstance(parsed, list):
            if not parsed:
                msg = "Model returned an empty array"
                raise EmptyResponseError(msg)
            parsed = parsed[0]

        if not isinstance(parsed, dict):
            msg = f"Model returned {type(parsed).__name__}, expected an object"
            raise EmptyResponseError(msg)
        if not parsed:
            msg = "Model returned an empty object"
            raise EmptyResponseError(msg)
        return parsed

    # -------------------------------------------------------------------------
    # Field coercion
    # -------------------------------------------------------------------------

    def _title(self, data: dict[str, Any], defaults: list[str]) -> str:
        title = _clean_text(data.get("title"))
        if title:
            return title
        defaults.append("title")
        return PLACEHOLDER_TITLE

    def _servings(self, data: dict[str, Any], defaults: list[str]) -> int:
        servings = _parse_servings(data.get("servings"))
        if servings is not None:
            return servings
        defaults.append("servings")
        return DEFAULT_SERVINGS

    def _ingredients(
        self, data: dict[str, Any], defaults: list[str]
    ) -> list[ExtractedIngredient]:
        source = _first_present(data, INGREDIENT_KEYS)
        if not isinstance(source, list):
            defaults.append("ingredients")
            return []

        ingredients = [
            ingredient
            for ingredient in map(_coerce_ingredient, source)
            if ingredient is not None
        ]
        if len(ingredients) < len(source):
            defaults.append("dropped_ingredients")
        return ingredients

    def _steps(self, data: dict[str, Any], defaults: list[str]) -> list[ExtractedStep]:
        source = _first_present(data, STEP_KEYS)
        if not isinstance(source, list):
            defaults.append("steps")
            return []

        surviving: list[tuple[str, int | None]] = []
        for entry in source:
            coerced = _coerce_step(entry)
            if coerced is not None:
                surviving.append(coerced)
        if len(surviving) < len(source):
            defaults.append("dropped_steps")

        # Step numbers always equal post-filter position
        if not _matches_positions([number for _, number in surviving]):
            defaults.append("step_numbers")

        return [
            ExtractedStep(text=text, step_number=position)
            for position, (text, _) in enumerate(surviving, start=1)
        ]

    def _tags(self, data: dict[str, Any]) -> list[str] | None:
        tags = data.get("tags")
        if not isinstance(tags, list):
            return None
        return [tag.strip() for tag in tags if isinstance(tag, str) and tag.strip()]

    def _apply_image_policy(
        self,
        recipe: ExtractedRecipe,
        data: dict[str, Any],
        candidate_image_url: str | None,
    ) -> None:
        image_url = _image_from(_first_present(data, IMAGE_KEYS))
        if not image_url and candidate_image_url:
            logger.debug("Using acquisition thumbnail as recipe image")
            image_url = candidate_image_url

        recipe.image_url = image_url
        recipe.image_url_unreliable = is_unreliable_image_url(image_url)


# =============================================================================
# Helpers
# =============================================================================


def unfence(raw_text: str) -> str:
    """Trim ``raw_text`` and return the body of a markdown code fence if any."""
    text = raw_text.strip()
    match = _FENCE_PATTERN.search(text)
    if match:
        return match.group(1).strip()
    return text


def _first_present(data: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _clean_text(value: Any) -> str | None:
    """Return trimmed text for strings and numbers, None for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, int | float):
        return _format_number(value)
    return None


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float) and value.is_integer() and value > 0:
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
        return number if number > 0 else None
    return None


def _matches_positions(numbers: list[int | None]) -> bool:
    return numbers == list(range(1, len(numbers) + 1))


def _parse_servings(value: Any) -> int | None:
    """Parse servings from ints, floats or text like ``"4-6 servings"``."""
    if isinstance(value, bool):
        return None
    number: float | None = None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMBER_PATTERN.search(value)
        if match:
            number = float(match.group())
    if number is None:
        return None
    servings = round(number)
    return servings if servings >= 1 else None


def _coerce_ingredient(entry: Any) -> ExtractedIngredient | None:
    if isinstance(entry, str):
        entry = {"text": entry}
    if not isinstance(entry, dict):
        return None

    quantity = _clean_text(_first_present(entry, ("quantity", "amount")))
    unit = _clean_text(entry.get("unit"))
    name = _clean_text(entry.get("name"))
    text = _clean_text(entry.get("text")) or " ".join(
        part for part in (quantity, unit, name) if part
    )
    if not text:
        return None

    return ExtractedIngredient(text=text, quantity=quantity, unit=unit, name=name or text)


def _coerce_step(entry: Any) -> tuple[str, int | None] | None:
    if isinstance(entry, str):
        entry = {"text": entry}
    if not isinstance(entry, dict):
        return None

    text = None
    for key in STEP_TEXT_KEYS:
        text = _clean_text(entry.get(key))
        if text:
            break
    if not text:
        return None

    number = _positive_int(_first_present(entry, ("stepNumber", "step_number")))
    if number is None:
        number = _positive_int(entry.get("number"))
    return text, number


def _image_from(value: Any) -> str | None:
    if isinstance(value, list):
        value = next((item for item in value if isinstance(item, str)), None)
    if isinstance(value, str):
        return value.strip() or None
    return None


def normalize_recipe(
    raw_text: str,
    *,
    candidate_image_url: str | None = None,
) -> ExtractedRecipe:
    """Normalize raw model text and return only the recipe.

    Raises:
        MalformedResponseError: If the text is not JSON even after repair.
        EmptyResponseError: If the JSON holds no recipe object.
    """
    return (
        RecipeNormalizer()
        .normalize(raw_text, candidate_image_url=candidate_image_url)
        .recipe
    )
