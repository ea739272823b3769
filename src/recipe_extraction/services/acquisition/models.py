"""Data models for acquired page content.

These models are created per extraction attempt and discarded once the
model request is built. They are never cached.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class AcquisitionStrategy(StrEnum):
    """Ladder rung that produced ``AcquiredContent.raw_text``."""

    READER = "reader"
    STRUCTURED_DATA = "structured_data"
    DIRECT_FETCH = "direct_fetch"
    SEARCH_SNIPPET = "search_snippet"


class CaptionOrigin(StrEnum):
    """Where a social caption hint came from."""

    PLATFORM = "platform"
    OPEN_GRAPH = "open_graph"


class PlatformMetadata(BaseModel):
    """Caption and cover image from a social-video platform API."""

    caption: str | None = None
    cover_url: str | None = None


class LinkPreview(BaseModel):
    """Open Graph style metadata read from a page's ``<meta>`` tags."""

    title: str | None = None
    description: str | None = None
    images: list[str] = Field(default_factory=list)

    @property
    def first_image(self) -> str | None:
        """First preview image, if any."""
        return self.images[0] if self.images else None


class AcquiredContent(BaseModel):
    """Best available text and hints for one source URL.

    ``scrape_succeeded`` is the signal the orchestrator uses to decide on
    server-side re-acquisition.
    """

    model_config = ConfigDict(validate_assignment=True)

    raw_text: str = Field(default="", description="Page text or serialized JSON-LD")
    candidate_image_url: str | None = Field(
        default=None, description="Platform cover, else Open Graph image"
    )
    social_caption: str | None = Field(
        default=None, description="Caption text from the platform or OG description"
    )
    social_title: str | None = Field(default=None, description="OG title")
    caption_origin: CaptionOrigin | None = None
    strategy: AcquisitionStrategy | None = None
    scrape_succeeded: bool = False

    @property
    def degraded(self) -> bool:
        """Only low-confidence caption or metadata hints are available."""
        return not self.raw_text

    @property
    def has_hints(self) -> bool:
        """Whether any caption or thumbnail hint was collected."""
        return bool(self.social_caption or self.candidate_image_url)
