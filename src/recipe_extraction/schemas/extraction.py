"""Request schemas for the extraction endpoints."""

from __future__ import annotations

from pydantic import AnyHttpUrl, Field

from recipe_extraction.core.config import Provider

from .base import APIRequest


class ExtractFromUrlRequest(APIRequest):
    """Extract a recipe from a web page or social post."""

    url: AnyHttpUrl = Field(..., description="Page or post URL")
    provider: Provider | None = Field(
        default=None, description="Model backend; server default when omitted"
    )


class ExtractFromImageRequest(APIRequest):
    """Extract a recipe from a photographed recipe card."""

    image_base64: str = Field(
        ..., min_length=1, description="Base64-encoded JPEG, without data: prefix"
    )
    provider: Provider | None = Field(
        default=None, description="Model backend; server default when omitted"
    )
