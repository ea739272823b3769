"""Unit tests for the JSON-LD recipe finder."""

from __future__ import annotations

import orjson
import pytest

from recipe_extraction.services.acquisition.jsonld import (
    extract_recipe_jsonld_text,
    find_recipe_jsonld,
    find_recipe_node,
)


pytestmark = pytest.mark.unit


def _page(*blocks: str) -> str:
    scripts = "".join(
        f'<script type="application/ld+json">{block}</script>' for block in blocks
    )
    return f"<html><head>{scripts}</head><body></body></html>"


class TestFindRecipeNode:
    """Tests for find_recipe_node."""

    def test_direct_recipe(self) -> None:
        """Should return a top-level Recipe object."""
        data = {"@type": "Recipe", "name": "Soup"}

        assert find_recipe_node(data) == data

    def test_type_list(self) -> None:
        """Should match Recipe inside an @type list."""
        data = {"@type": ["Recipe", "NewsArticle"], "name": "Soup"}

        assert find_recipe_node(data) == data

    def test_graph(self) -> None:
        """Should search @graph arrays."""
        recipe = {"@type": "Recipe", "name": "Soup"}
        data = {"@graph": [{"@type": "WebSite"}, recipe]}

        assert find_recipe_node(data) == recipe

    def test_nested_lists(self) -> None:
        """Should search arrays nested inside arrays."""
        recipe = {"@type": "Recipe", "name": "Soup"}

        assert find_recipe_node([[{"@type": "Person"}], [recipe]]) == recipe

    def test_no_recipe(self) -> None:
        """Should return None when no Recipe node exists."""
        assert find_recipe_node({"@type": "Article"}) is None
        assert find_recipe_node("Recipe") is None


class TestFindRecipeJsonld:
    """Tests for HTML scanning."""

    def test_skips_invalid_blocks(self) -> None:
        """Should ignore unparseable blocks and keep looking."""
        html = _page("{not json", '{"@type": "Recipe", "name": "Stew"}')

        recipe = find_recipe_jsonld(html)

        assert recipe is not None
        assert recipe["name"] == "Stew"

    def test_single_quoted_type_attribute(self) -> None:
        """Should match script tags with extra or single-quoted attributes."""
        html = (
            "<script id='ld' type='application/ld+json'>"
            '{"@type": "Recipe", "name": "Pie"}</script>'
        )

        recipe = find_recipe_jsonld(html)

        assert recipe is not None
        assert recipe["name"] == "Pie"

    def test_no_jsonld(self) -> None:
        """Should return None for pages without structured data."""
        assert find_recipe_jsonld("<html><body>Hello</body></html>") is None


class TestExtractRecipeJsonldText:
    """Tests for the serialized form handed to the model."""

    def test_serializes_recipe(self) -> None:
        """Should serialize only the Recipe node."""
        html = _page(
            '{"@graph": [{"@type": "Organization", "name": "Blog"},'
            ' {"@type": "Recipe", "name": "Soup",'
            ' "recipeIngredient": ["2 cups tomatoes"]}]}'
        )

        text = extract_recipe_jsonld_text(html)

        assert text is not None
        assert orjson.loads(text) == {
            "@type": "Recipe",
            "name": "Soup",
            "recipeIngredient": ["2 cups tomatoes"],
        }

    def test_returns_none_without_recipe(self) -> None:
        """Should return None when the page has no Recipe."""
        assert extract_recipe_jsonld_text(_page('{"@type": "WebPage"}')) is None
