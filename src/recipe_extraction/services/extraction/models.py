"""Orchestration state and outcome models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from recipe_extraction.schemas.recipe import ExtractedRecipe


class ExtractionState(StrEnum):
    """States of a single extraction call.

    ``DONE`` and ``FAILED`` are terminal.
    """

    START = "start"
    ACQUIRE_CLIENT_SIDE = "acquire_client_side"
    ACQUIRE_SERVER_SIDE = "acquire_server_side"
    BUILD_REQUEST = "build_request"
    CALL_MODEL = "call_model"
    NORMALIZE = "normalize"
    DONE = "done"
    FAILED = "failed"


class ExtractionSource(StrEnum):
    """Kind of input an extraction started from."""

    URL = "url"
    IMAGE = "image"


class ExtractionOutcome(BaseModel):
    """A successful extraction with its diagnostics."""

    recipe: ExtractedRecipe
    source: ExtractionSource
    provider: str
    states: list[ExtractionState] = Field(default_factory=list)
    degraded: bool = Field(
        default=False, description="Only caption or metadata hints were available"
    )
    defaults_applied: list[str] = Field(default_factory=list)
