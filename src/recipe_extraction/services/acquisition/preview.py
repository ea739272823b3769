"""Link preview parsing.

Reads Open Graph metadata from a page's ``<meta>`` tags, falling back to
Twitter card tags, the plain ``description`` meta and ``<title>``. Social
platforms usually put the post caption in ``og:description``.
"""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup

from recipe_extraction.services.acquisition.models import LinkPreview


def _meta_content(soup: BeautifulSoup, *keys: str) -> str | None:
    for key in keys:
        tag = soup.find("meta", attrs={"property": key}) or soup.find(
            "meta", attrs={"name": key}
        )
        if tag is None:
            continue
        content = tag.get("content")
        if isinstance(content, str) and content.strip():
            return content.strip()
    return None


def parse_link_preview(html: str, base_url: str) -> LinkPreview:
    """Build a ``LinkPreview`` from page HTML.

    Args:
        html: Raw HTML of the page.
        base_url: Page URL, used to resolve relative image paths.

    Returns:
        LinkPreview with whatever metadata the page exposes.
    """
    soup = BeautifulSoup(html, "html.parser")

    title = _meta_content(soup, "og:title", "twitter:title")
    if title is None and soup.title is not None:
        title = soup.title.get_text(strip=True) or None

    description = _meta_content(
        soup, "og:description", "twitter:description", "description"
    )

    images: list[str] = []
    for key in ("og:image", "og:image:url", "og:image:secure_url", "twitter:image"):
        for tag in soup.find_all("meta", attrs={"property": key}) + soup.find_all(
            "meta", attrs={"name": key}
        ):
            content = tag.get("content")
            if isinstance(content, str) and content.strip():
                image = urljoin(base_url, content.strip())
                if image not in images:
                    images.append(image)

    return LinkPreview(title=title, description=description, images=images)
