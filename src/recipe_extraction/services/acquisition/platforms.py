"""Social-video platform support.

TikTok pages block both the rendering proxy and Open Graph readers, so
their caption and cover image come from the TikWM metadata API instead.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

from recipe_extraction.services.acquisition.models import PlatformMetadata


_TIKTOK_HOSTS = ("tiktok.com",)


def is_tiktok_url(url: str) -> bool:
    """Check whether ``url`` points at a TikTok video or short link."""
    host = (urlparse(url).hostname or "").lower()
    return any(host == h or host.endswith(f".{h}") for h in _TIKTOK_HOSTS)


def parse_tikwm_response(payload: Any) -> PlatformMetadata | None:
    """Read caption and cover from a TikWM ``/api/`` response body.

    Returns:
        PlatformMetadata, or None when the body has no usable ``data``.
    """
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if not isinstance(data, dict):
        return None

    title = data.get("title")
    cover = data.get("cover") or data.get("origin_cover")
    metadata = PlatformMetadata(
        caption=title.strip() if isinstance(title, str) and title.strip() else None,
        cover_url=cover if isinstance(cover, str) and cover else None,
    )
    if metadata.caption is None and metadata.cover_url is None:
        return None
    return metadata
