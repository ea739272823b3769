"""Prometheus metrics instrumentation.

This module provides:
- FastAPI automatic request metrics
- The extraction outcome counter fed by ExtractionTelemetry
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator, metrics

from recipe_extraction.core.config import get_settings
from recipe_extraction.observability.logging import get_logger


if TYPE_CHECKING:
    from fastapi import FastAPI

    from recipe_extraction.core.config import Settings


logger = get_logger(__name__)

METRIC_NAMESPACE = "recipe_extraction"

EXTRACTION_OUTCOMES = Counter(
    "outcomes_total",
    "Recipe extraction results by input source, provider and outcome.",
    labelnames=("source", "provider", "outcome"),
    namespace=METRIC_NAMESPACE,
)


def setup_metrics(app: FastAPI, settings: Settings | None = None) -> Instrumentator:
    """Configure Prometheus HTTP instrumentation and expose /metrics.

    Args:
        app: The FastAPI application instance.
        settings: Application settings; defaults to the cached instance.

    Returns:
        Configured Instrumentator instance.
    """
    settings = settings or get_settings()

    if not settings.observability.metrics.enabled:
        logger.info("Metrics collection disabled")
        return Instrumentator()

    prefix = settings.api.v1_prefix

    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=[
            f"{prefix}/health",
            f"{prefix}/metrics",
            "/openapi.json",
            "/docs",
        ],
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True,
    )

    instrumentator.add(
        metrics.default(
            metric_namespace=METRIC_NAMESPACE,
            metric_subsystem="http",
        )
    )

    instrumentator.instrument(app)

    metrics_endpoint = f"{prefix}/metrics"
    instrumentator.expose(
        app,
        endpoint=metrics_endpoint,
        include_in_schema=False,
    )

    logger.info("Prometheus metrics configured", endpoint=metrics_endpoint)

    return instrumentator


__all__ = ["EXTRACTION_OUTCOMES", "setup_metrics"]
