"""Content acquisition ladder."""

from recipe_extraction.services.acquisition.models import (
    AcquiredContent,
    AcquisitionStrategy,
    CaptionOrigin,
    LinkPreview,
    PlatformMetadata,
)
from recipe_extraction.services.acquisition.service import (
    ContentAcquirer,
    build_search_query,
)


__all__ = [
    "AcquiredContent",
    "AcquisitionStrategy",
    "CaptionOrigin",
    "ContentAcquirer",
    "LinkPreview",
    "PlatformMetadata",
    "build_search_query",
]
