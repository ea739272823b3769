"""HTML to plain text helpers."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Comment


_WHITESPACE = re.compile(r"\s+")

_NON_CONTENT_TAGS = [
    "script",
    "style",
    "noscript",
    "iframe",
    "svg",
    "template",
    "head",
]


def html_to_text(html: str, max_chars: int | None = None) -> str:
    """Strip markup, scripts and styles, then collapse whitespace.

    Args:
        html: Raw HTML content.
        max_chars: Keep at most this many leading characters.

    Returns:
        Single-spaced plain text.
    """
    soup = BeautifulSoup(html, "html.parser")

    for tag in soup(_NON_CONTENT_TAGS):
        tag.decompose()

    for comment in soup.find_all(string=lambda t: isinstance(t, Comment)):
        comment.extract()

    text = _WHITESPACE.sub(" ", soup.get_text(" ")).strip()
    if max_chars is not None:
        return text[:max_chars]
    return text
