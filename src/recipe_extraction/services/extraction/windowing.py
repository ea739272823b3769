"""Recipe-section windowing.

Recipe blog pages are dominated by navigation, ads and life stories. When
page text exceeds the character limit, the window is anchored at the first
section marker so the ingredients and instructions survive the cut.
"""

from __future__ import annotations

import re


DEFAULT_MAX_CHARS = 40_000
DEFAULT_LEAD_IN_CHARS = 2_000

SECTION_MARKERS = (
    "ingredients",
    "directions",
    "instructions",
    "steps",
    "recipe instructions",
    "how to make",
)

# Earliest match of any marker, case-insensitive
_MARKER_PATTERN = re.compile(
    "|".join(re.escape(marker) for marker in SECTION_MARKERS),
    re.IGNORECASE,
)


def find_section_start(raw_text: str) -> int | None:
    """Return the offset of the earliest section marker, if any."""
    match = _MARKER_PATTERN.search(raw_text)
    return match.start() if match else None


def select_recipe_window(
    raw_text: str,
    max_chars: int = DEFAULT_MAX_CHARS,
    lead_in_chars: int = DEFAULT_LEAD_IN_CHARS,
) -> str:
    """Select the part of ``raw_text`` most likely to hold the recipe.

    Text within the limit is returned unchanged. Otherwise the window starts
    ``lead_in_chars`` before the first marker (title and description
    usually precede the ingredients heading) and runs ``max_chars`` past
    it. Without a marker, the first ``max_chars`` are kept. The window is
    always a verbatim substring.

    Args:
        raw_text: Acquired page text.
        max_chars: Maximum window length.
        lead_in_chars: Context kept before the marker.

    Returns:
        The windowed text.
    """
    if len(raw_text) <= max_chars:
        return raw_text

    start = find_section_start(raw_text)
    if start is None:
        return raw_text[:max_chars]

    return raw_text[max(0, start - lead_in_chars) : start + max_chars]
