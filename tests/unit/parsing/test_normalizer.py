"""Unit tests for RecipeNormalizer."""

from __future__ import annotations

import orjson
import pytest

from recipe_extraction.parsing.exceptions import (
    EmptyResponseError,
    MalformedResponseError,
)
from recipe_extraction.parsing.normalizer import (
    RecipeNormalizer,
    is_unreliable_image_url,
    normalize_recipe,
    unfence,
)
from recipe_extraction.schemas.recipe import DEFAULT_SERVINGS, PLACEHOLDER_TITLE


pytestmark = pytest.mark.unit


@pytest.fixture
def normalizer() -> RecipeNormalizer:
    """Create a normalizer."""
    return RecipeNormalizer()


class TestUnfence:
    """Tests for markdown fence stripping."""

    def test_plain_text_is_trimmed(self) -> None:
        """Should trim surrounding whitespace."""
        assert unfence('  {"a": 1}\n') == '{"a": 1}'

    def test_fenced_json_is_extracted(self) -> None:
        """Should return the body of a ```json fence with prose around it."""
        raw = 'Here you go:\n```json\n{"a": 1}\n```\nEnjoy!'
        assert unfence(raw) == '{"a": 1}'

    def test_unterminated_fence_is_extracted(self) -> None:
        """Should tolerate truncated output missing the closing fence."""
        assert unfence('```\n{"a": 1') == '{"a": 1'


class TestScenarios:
    """End-to-end normalization scenarios."""

    def test_fenced_response_with_prose(self, normalizer: RecipeNormalizer) -> None:
        """Should unfence, default servings and keep the ingredient."""
        raw = (
            'Here you go:\n```json\n{"title":"Soup","ingredients":'
            '[{"name":"Salt"}],"steps":[]}\n```'
        )

        recipe = normalizer.normalize(raw).recipe

        assert recipe.title == "Soup"
        assert recipe.servings == 4
        assert len(recipe.ingredients) == 1
        assert recipe.ingredients[0].name == "Salt"
        assert recipe.ingredients[0].text == "Salt"
        assert recipe.steps == []

    def test_backticks_inside_valid_json_strings(
        self, normalizer: RecipeNormalizer
    ) -> None:
        """Should parse valid JSON whose strings contain a triple backtick."""
        raw = orjson.dumps(
            {
                "title": "Markdown Cake",
                "description": "Write ``` around code",
                "ingredients": [{"name": "flour"}],
                "steps": [{"text": "Bake"}],
            }
        ).decode()

        recipe = normalizer.normalize(raw).recipe

        assert recipe.title == "Markdown Cake"
        assert recipe.description == "Write ``` around code"
        assert [i.name for i in recipe.ingredients] == ["flour"]
        assert [s.text for s in recipe.steps] == ["Bake"]

    def test_array_wrapped_response(self, normalizer: RecipeNormalizer) -> None:
        """Should unwrap a single-element array and number the step."""
        raw = '[{"title":"X","ingredients":[],"steps":[{"text":"Mix"}]}]'

        recipe = normalizer.normalize(raw).recipe

        assert recipe.title == "X"
        assert len(recipe.steps) == 1
        assert recipe.steps[0].text == "Mix"
        assert recipe.steps[0].step_number == 1

    def test_empty_title_uses_placeholder(self, normalizer: RecipeNormalizer) -> None:
        """Should replace an empty title with the placeholder."""
        result = normalizer.normalize('{"title":"","ingredients":[],"steps":[]}')

        assert result.recipe.title == PLACEHOLDER_TITLE
        assert "title" in result.defaults_applied

    def test_unquoted_keys_and_trailing_comma_are_repaired(
        self, normalizer: RecipeNormalizer
    ) -> None:
        """Should repair malformed JSON instead of raising."""
        recipe = normalizer.normalize("{title: 'Soup', ingredients: [1,2,]}").recipe

        assert recipe.title == "Soup"
        # Bare numbers carry no ingredient text
        assert recipe.ingredients == []
        assert recipe.steps == []


class TestParsingFailures:
    """Tests for fatal parsing outcomes."""

    def test_prose_raises_malformed_with_excerpt(
        self, normalizer: RecipeNormalizer
    ) -> None:
        """Should raise MalformedResponseError carrying a short excerpt."""
        raw = "I'm sorry, I could not find a recipe on this page. " * 20

        with pytest.raises(MalformedResponseError) as exc_info:
            normalizer.normalize(raw)

        assert len(exc_info.value.excerpt) == 300
        assert exc_info.value.excerpt == raw[:300]

    def test_empty_array_raises_empty_response(
        self, normalizer: RecipeNormalizer
    ) -> None:
        """Should raise EmptyResponseError for []."""
        with pytest.raises(EmptyResponseError):
            normalizer.normalize("[]")

    def test_empty_object_raises_empty_response(
        self, normalizer: RecipeNormalizer
    ) -> None:
        """Should raise EmptyResponseError for {}."""
        with pytest.raises(EmptyResponseError):
            normalizer.normalize("{}")

    def test_scalar_raises_empty_response(self, normalizer: RecipeNormalizer) -> None:
        """Should raise EmptyResponseError for a JSON scalar."""
        with pytest.raises(EmptyResponseError):
            normalizer.normalize('"just a string"')

    def test_array_of_scalars_raises_empty_response(
        self, normalizer: RecipeNormalizer
    ) -> None:
        """Should raise EmptyResponseError when the first element is not an object."""
        with pytest.raises(EmptyResponseError):
            normalizer.normalize("[1, 2]")

    def test_errors_carry_user_messages(self) -> None:
        """Should expose distinct user-facing messages."""
        assert MalformedResponseError.user_message != EmptyResponseError.user_message


class TestMissingKeys:
    """Tests for absent ingredient and step arrays."""

    def test_missing_arrays_default_to_empty(self, normalizer: RecipeNormalizer) -> None:
        """Should return empty lists rather than raising."""
        result = normalizer.normalize('{"title": "Toast"}')

        assert result.recipe.ingredients == []
        assert result.recipe.steps == []
        assert "ingredients" in result.defaults_applied
        assert "steps" in result.defaults_applied

    def test_non_array_values_coerced_to_empty(
        self, normalizer: RecipeNormalizer
    ) -> None:
        """Should coerce non-list ingredient and step values to []."""
        recipe = normalizer.normalize(
            '{"title": "Toast", "ingredients": "bread", "steps": {"a": 1}}'
        ).recipe

        assert recipe.ingredients == []
        assert recipe.steps == []

    def test_tags_absent_when_not_a_list(self, normalizer: RecipeNormalizer) -> None:
        """Should leave tags unset instead of defaulting to []."""
        recipe = normalizer.normalize('{"title": "Toast", "tags": "breakfast"}').recipe

        assert recipe.tags is None


class TestIngredients:
    """Tests for ingredient coercion."""

    def test_alias_key_is_accepted(self, normalizer: RecipeNormalizer) -> None:
        """Should read ingredients from the singular alias."""
        recipe = normalizer.normalize(
            '{"title": "T", "ingredient": [{"text": "1 egg", "name": "egg"}]}'
        ).recipe

        assert [i.name for i in recipe.ingredients] == ["egg"]

    def test_blank_entries_dropped_order_kept(
        self, normalizer: RecipeNormalizer
    ) -> None:
        """Should drop blank rows and keep extraction order."""
        raw = orjson.dumps(
            {
                "title": "T",
                "ingredients": [
                    {"text": "zucchini", "name": "zucchini"},
                    {"text": "  ", "name": ""},
                    {"name": "apple"},
                    {},
                    {"text": "  ", "quantity": "2", "unit": "cups", "name": "milk"},
                ],
            }
        ).decode()

        result = normalizer.normalize(raw)

        assert [i.text for i in result.recipe.ingredients] == [
            "zucchini",
            "apple",
            "2 cups milk",
        ]
        assert "dropped_ingredients" in result.defaults_applied

    def test_text_assembled_from_parts(self, normalizer: RecipeNormalizer) -> None:
        """Should assemble display text from quantity, unit and name."""
        recipe = normalizer.normalize(
            '{"title": "T", "ingredients": [{"quantity": 1.5, "unit": "cup", '
            '"name": "flour"}]}'
        ).recipe

        ingredient = recipe.ingredients[0]
        assert ingredient.text == "1.5 cup flour"
        assert ingredient.quantity == "1.5"

    def test_integral_float_quantity_rendered_without_decimal(
        self, normalizer: RecipeNormalizer
    ) -> None:
        """Should render 2.0 as '2'."""
        recipe = normalizer.normalize(
            '{"title": "T", "ingredients": [{"quantity": 2.0, "name": "eggs"}]}'
        ).recipe

        assert recipe.ingredients[0].quantity == "2"

    def test_string_entries_become_text(self, normalizer: RecipeNormalizer) -> None:
        """Should accept plain string ingredient lines."""
        recipe = normalizer.normalize(
            '{"title": "T", "ingredients": ["1 tsp salt", ""]}'
        ).recipe

        assert len(recipe.ingredients) == 1
        assert recipe.ingredients[0].text == "1 tsp salt"
        assert recipe.ingredients[0].name == "1 tsp salt"


class TestSteps:
    """Tests for step coercion and numbering."""

    def test_step_aliases(self, normalizer: RecipeNormalizer) -> None:
        """Should read steps from instructions and step text from aliases."""
        recipe = normalizer.normalize(
            '{"title": "T", "instructions": [{"instruction": "Boil"}, '
            '{"description": "Drain"}]}'
        ).recipe

        assert [s.text for s in recipe.steps] == ["Boil", "Drain"]

    @pytest.mark.parametrize("key", ["instruction", "method"])
    def test_other_step_alias_keys(self, normalizer: RecipeNormalizer, key: str) -> None:
        """Should accept the remaining step aliases."""
        recipe = normalizer.normalize(f'{{"title": "T", "{key}": ["Stir"]}}').recipe

        assert [s.text for s in recipe.steps] == ["Stir"]

    def test_blank_steps_dropped(self, normalizer: RecipeNormalizer) -> None:
        """Should drop steps with no text and renumber the survivors."""
        recipe = normalizer.normalize(
            '{"title": "T", "steps": [{"text": "A"}, {"text": " "}, {"text": "B"}]}'
        ).recipe

        assert [(s.text, s.step_number) for s in recipe.steps] == [("A", 1), ("B", 2)]

    def test_out_of_order_numbers_renumbered(
        self, normalizer: RecipeNormalizer
    ) -> None:
        """Should assign sequential numbers matching position."""
        recipe = normalizer.normalize(
            '{"title": "T", "steps": [{"text": "A", "stepNumber": 3}, '
            '{"text": "B", "stepNumber": 1}, {"text": "C"}]}'
        ).recipe

        assert [s.step_number for s in recipe.steps] == [1, 2, 3]

    def test_ascending_explicit_numbers_kept(
        self, normalizer: RecipeNormalizer
    ) -> None:
        """Should keep explicit numbers that already match positions."""
        recipe = normalizer.normalize(
            '{"title": "T", "steps": [{"text": "A", "stepNumber": 1}, '
            '{"text": "B", "number": 2}]}'
        ).recipe

        assert [s.step_number for s in recipe.steps] == [1, 2]

    def test_numbers_follow_position_after_blank_step_dropped(
        self, normalizer: RecipeNormalizer
    ) -> None:
        """Should close the gap left by a dropped step."""
        result = normalizer.normalize(
            '{"title": "T", "steps": [{"text": "A", "stepNumber": 1}, '
            '{"text": "", "stepNumber": 2}, {"text": "C", "stepNumber": 3}]}'
        )

        assert [(s.text, s.step_number) for s in result.recipe.steps] == [
            ("A", 1),
            ("C", 2),
        ]
        assert "dropped_steps" in result.defaults_applied
        assert "step_numbers" in result.defaults_applied

    def test_non_positive_numbers_renumbered(
        self, normalizer: RecipeNormalizer
    ) -> None:
        """Should never emit zero or negative step numbers."""
        recipe = normalizer.normalize(
            '{"title": "T", "steps": [{"text": "A", "stepNumber": 0}, '
            '{"text": "B", "stepNumber": -4}]}'
        ).recipe

        assert [s.step_number for s in recipe.steps] == [1, 2]


class TestServings:
    """Tests for servings coercion."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("6", 6),
            ("4-6 servings", 4),
            (2.6, 3),
            (8, 8),
            (0, DEFAULT_SERVINGS),
            ("a few", DEFAULT_SERVINGS),
            (None, DEFAULT_SERVINGS),
            (True, DEFAULT_SERVINGS),
        ],
    )
    def test_servings_values(
        self, normalizer: RecipeNormalizer, value: object, expected: int
    ) -> None:
        """Should parse usable values and default the rest to 4."""
        raw = orjson.dumps({"title": "T", "servings": value}).decode()

        assert normalizer.normalize(raw).recipe.servings == expected


class TestImagePolicy:
    """Tests for image URL handling."""

    def test_missing_image_uses_candidate(self, normalizer: RecipeNormalizer) -> None:
        """Should substitute the acquisition thumbnail."""
        recipe = normalizer.normalize(
            '{"title": "T"}', candidate_image_url="https://example.com/thumb.jpg"
        ).recipe

        assert recipe.image_url == "https://example.com/thumb.jpg"
        assert recipe.image_url_unreliable is False

    def test_model_image_preferred_over_candidate(
        self, normalizer: RecipeNormalizer
    ) -> None:
        """Should keep the model's image when present."""
        recipe = normalizer.normalize(
            '{"title": "T", "imageUrl": "https://example.com/dish.jpg"}',
            candidate_image_url="https://example.com/thumb.jpg",
        ).recipe

        assert recipe.image_url == "https://example.com/dish.jpg"

    def test_social_cdn_image_kept_and_flagged(
        self, normalizer: RecipeNormalizer
    ) -> None:
        """Should retain cookie-gated CDN images but flag them."""
        url = "https://scontent-lax3-1.cdninstagram.com/v/t51/abc.jpg"
        recipe = normalizer.normalize(
            orjson.dumps({"title": "T", "imageUrl": url}).decode()
        ).recipe

        assert recipe.image_url == url
        assert recipe.image_url_unreliable is True

    def test_no_image_anywhere(self, normalizer: RecipeNormalizer) -> None:
        """Should leave the image absent."""
        recipe = normalizer.normalize('{"title": "T"}').recipe

        assert recipe.image_url is None
        assert recipe.image_url_unreliable is False

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://p16-sign.tiktokcdn-us.com/obj/cover.jpeg", True),
            ("https://scontent.fbcdn.net/photo.jpg", True),
            ("https://images.example.com/photo.jpg", False),
            ("https://notfbcdn.net/photo.jpg", False),
            (None, False),
        ],
    )
    def test_unreliable_host_detection(self, url: str | None, expected: bool) -> None:
        """Should match CDN hosts by domain suffix only."""
        assert is_unreliable_image_url(url) is expected


class TestIdempotence:
    """Normalizing normalized output yields the same recipe."""

    def test_round_trip_is_stable(
        self, normalizer: RecipeNormalizer, recipe_json: str
    ) -> None:
        """Should be a fixed point after one pass."""
        first = normalizer.normalize(recipe_json).recipe
        second = normalizer.normalize(first.model_dump_json()).recipe

        assert second == first
        assert second.model_dump() == first.model_dump()

    def test_round_trip_of_defaulted_recipe(self, normalizer: RecipeNormalizer) -> None:
        """Should be stable when defaults and renumbering were applied."""
        first = normalizer.normalize(
            '{"ingredients": ["salt", {"name": "pepper"}], '
            '"steps": [{"text": "B", "stepNumber": 5}, {"text": "A", "stepNumber": 2}], '
            '"imageUrl": "https://scontent.cdninstagram.com/x.jpg"}'
        ).recipe
        second = normalizer.normalize(first.model_dump_json()).recipe

        assert second == first

    def test_complete_recipe_reports_no_defaults(
        self, normalizer: RecipeNormalizer, recipe_json: str
    ) -> None:
        """Should report an empty defaults list for complete data."""
        assert normalizer.normalize(recipe_json).defaults_applied == []


def test_normalize_recipe_returns_recipe_only(recipe_json: str) -> None:
    """Should return the ExtractedRecipe directly."""
    recipe = normalize_recipe(recipe_json)

    assert recipe.title == "Tomato Soup"
    assert recipe.prep_time == "10 min"
    assert recipe.tags == ["soup", "vegetarian"]
