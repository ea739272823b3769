"""JSON-LD recipe finder.

Locates schema.org/Recipe structured data embedded in HTML pages. When a
page carries one, the serialized blob is handed to the model as-is; it is
far denser than the rendered page text.
"""

from __future__ import annotations

import re
from typing import Any

import orjson

from recipe_extraction.observability.logging import get_logger


logger = get_logger(__name__)

_JSONLD_PATTERN = re.compile(
    r'<script[^>]*type=["\']application/ld\+json["\'][^>]*>(.*?)</script>',
    re.DOTALL | re.IGNORECASE,
)


def find_recipe_jsonld(html: str) -> dict[str, Any] | None:
    """Return the first Recipe object found in the page's JSON-LD blocks.

    Args:
        html: HTML content to search.

    Returns:
        Recipe dictionary if found, None otherwise.
    """
    for block in _JSONLD_PATTERN.findall(html):
        try:
            data = orjson.loads(block.strip())
        except orjson.JSONDecodeError:
            continue

        recipe = find_recipe_node(data)
        if recipe is not None:
            return recipe

    return None


def extract_recipe_jsonld_text(html: str) -> str | None:
    """Serialize the page's Recipe JSON-LD, if present."""
    recipe = find_recipe_jsonld(html)
    if recipe is None:
        return None
    return orjson.dumps(recipe).decode()


def find_recipe_node(data: Any) -> dict[str, Any] | None:
    """Find a Recipe node in parsed JSON-LD, depth first.

    Handles:
    - Direct Recipe object
    - ``@graph`` arrays containing a Recipe
    - Arrays of objects, including arrays nested in arrays

    Args:
        data: Parsed JSON-LD data.

    Returns:
        Recipe dictionary if found, None otherwise.
    """
    if isinstance(data, dict):
        schema_type = data.get("@type", "")
        if isinstance(schema_type, list):
            schema_type = " ".join(str(t) for t in schema_type)
        if "Recipe" in str(schema_type):
            return data

        graph = data.get("@graph")
        if graph is not None:
            return find_recipe_node(graph)

    elif isinstance(data, list):
        for item in data:
            result = find_recipe_node(item)
            if result is not None:
                return result

    return None
