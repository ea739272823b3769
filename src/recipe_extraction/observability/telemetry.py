"""Fire-and-forget extraction telemetry.

Outcome reporting runs in background tasks with their own error boundary,
so a failing sink can never change what the caller receives.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from recipe_extraction.observability.logging import get_logger
from recipe_extraction.observability.metrics import EXTRACTION_OUTCOMES


if TYPE_CHECKING:
    from recipe_extraction.services.extraction.models import ExtractionOutcome


logger = get_logger(__name__)


class ExtractionTelemetry:
    """Records extraction outcomes without blocking the caller.

    Tasks are held in a set until they finish so they are not garbage
    collected mid-flight.
    """

    def __init__(self, *, enabled: bool = True) -> None:
        self.enabled = enabled
        self._tasks: set[asyncio.Task[None]] = set()

    def record_success(self, outcome: ExtractionOutcome) -> None:
        """Report a completed extraction.

        ``defaulted`` is reported separately from ``complete`` so that
        silently filled fields stay visible in dashboards.
        """
        label = "defaulted" if outcome.defaults_applied else "complete"
        self._spawn(
            source=outcome.source,
            provider=outcome.provider,
            outcome=label,
            details={
                "states": [state.value for state in outcome.states],
                "degraded": outcome.degraded,
                "defaults_applied": outcome.defaults_applied,
            },
        )

    def record_failure(self, *, source: str, provider: str, error: Exception) -> None:
        """Report a fatal extraction error by exception type."""
        self._spawn(
            source=source,
            provider=provider,
            outcome=type(error).__name__,
            details={"error": str(error)},
        )

    async def drain(self) -> None:
        """Wait for all in-flight telemetry tasks (used at shutdown)."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _spawn(
        self,
        *,
        source: str,
        provider: str,
        outcome: str,
        details: dict[str, object],
    ) -> None:
        if not self.enabled:
            return
        try:
            task = asyncio.get_running_loop().create_task(
                self._emit(source, provider, outcome, details)
            )
        except RuntimeError:
            logger.debug("No running event loop, skipping telemetry", outcome=outcome)
            return
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _emit(
        self,
        source: str,
        provider: str,
        outcome: str,
        details: dict[str, object],
    ) -> None:
        try:
            EXTRACTION_OUTCOMES.labels(
                source=source, provider=provider, outcome=outcome
            ).inc()
            logger.info(
                "Extraction telemetry",
                source=source,
                provider=provider,
                outcome=outcome,
                **details,
            )
        except Exception as e:
            logger.warning("Telemetry emission failed", error=str(e))
