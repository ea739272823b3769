"""Observability components: logging, metrics, and extraction telemetry."""

from recipe_extraction.observability.logging import (
    bind_context,
    clear_context,
    get_context,
    get_logger,
    logger,
    setup_logging,
    unbind_context,
)
from recipe_extraction.observability.metrics import setup_metrics
from recipe_extraction.observability.telemetry import ExtractionTelemetry


__all__ = [
    "ExtractionTelemetry",
    "bind_context",
    "clear_context",
    "get_context",
    "get_logger",
    "logger",
    "setup_logging",
    "setup_metrics",
    "unbind_context",
]
