"""Recipe extraction orchestrator.

Coordinates acquisition, request building, the model call and
normalization for one extraction call:

    START -> ACQUIRE_CLIENT_SIDE -> [ACQUIRE_SERVER_SIDE] -> BUILD_REQUEST
          -> CALL_MODEL -> NORMALIZE -> DONE

Server-side acquisition runs only when the client-side attempt reports
``scrape_succeeded=False``. Any fatal error ends in ``FAILED`` and
propagates unchanged. The model call is never retried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from recipe_extraction.core.config import get_settings
from recipe_extraction.llm.client import create_model_client
from recipe_extraction.observability.logging import get_logger
from recipe_extraction.observability.telemetry import ExtractionTelemetry
from recipe_extraction.parsing.normalizer import RecipeNormalizer
from recipe_extraction.services.extraction.models import (
    ExtractionOutcome,
    ExtractionSource,
    ExtractionState,
)
from recipe_extraction.services.extraction.request_builder import (
    ExtractionRequestBuilder,
)


if TYPE_CHECKING:
    from collections.abc import Callable

    from recipe_extraction.core.config import Provider, Settings
    from recipe_extraction.llm.client.protocol import ModelClientProtocol
    from recipe_extraction.llm.models import ExtractionRequest
    from recipe_extraction.schemas.recipe import ExtractedRecipe
    from recipe_extraction.services.acquisition import ContentAcquirer


logger = get_logger(__name__)


class _StateTrail:
    """Ordered record of the states one extraction call visited."""

    def __init__(self, source: ExtractionSource, provider: Provider) -> None:
        self.source = source
        self.provider = provider
        self.states: list[ExtractionState] = [ExtractionState.START]

    @property
    def current(self) -> ExtractionState:
        return self.states[-1]

    def enter(self, state: ExtractionState) -> None:
        logger.debug(
            "Extraction state change",
            source=str(self.source),
            provider=str(self.provider),
            previous=str(self.current),
            state=str(state),
        )
        self.states.append(state)


class RecipeExtractionService:
    """Façade over the extraction pipeline.

    ``extract_from_url`` and ``extract_from_image`` are the public entry
    points. Model clients are memoized per service instance, never per
    process, so separately constructed services stay isolated.

    Example:
        ```python
        acquirer = ContentAcquirer()
        service = RecipeExtractionService(acquirer)

        recipe = await service.extract_from_url("https://example.com/soup")
        print(recipe.title, len(recipe.ingredients))

        await service.shutdown()
        ```
    """

    def __init__(
        self,
        acquirer: ContentAcquirer,
        *,
        settings: Settings | None = None,
        request_builder: ExtractionRequestBuilder | None = None,
        normalizer: RecipeNormalizer | None = None,
        telemetry: ExtractionTelemetry | None = None,
        client_factory: Callable[[Provider, Settings], ModelClientProtocol]
        | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            acquirer: Content acquirer used for URL extractions.
            settings: Application settings; defaults to the cached instance.
            request_builder: Request builder; built from settings if omitted.
            normalizer: Response normalizer.
            telemetry: Outcome telemetry; follows settings if omitted.
            client_factory: Builds a model client for a provider.
        """
        self._settings = settings or get_settings()
        self._acquirer = acquirer
        self._request_builder = request_builder or ExtractionRequestBuilder(
            self._settings
        )
        self._normalizer = normalizer or RecipeNormalizer()
        self._telemetry = telemetry or ExtractionTelemetry(
            enabled=self._settings.observability.telemetry.enabled
        )
        self._client_factory = client_factory or create_model_client
        self._clients: dict[Provider, ModelClientProtocol] = {}

    async def shutdown(self) -> None:
        """Close model clients and flush pending telemetry."""
        for client in self._clients.values():
            await client.shutdown()
        self._clients.clear()
        await self._telemetry.drain()
        logger.debug("RecipeExtractionService shutdown")

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    async def extract_from_url(
        self,
        url: str,
        *,
        provider: Provider | None = None,
    ) -> ExtractedRecipe:
        """Extract a recipe from a web page or social post URL.

        Args:
            url: Source URL.
            provider: Backend override; defaults to ``llm.default_provider``.

        Returns:
            The validated recipe.

        Raises:
            LLMConfigurationError: If the provider has no credential.
            LLMRequestError: If the model call fails or returns no text.
            MalformedResponseError: If the model text is not JSON.
            EmptyResponseError: If the model output holds no recipe.
        """
        outcome = await self.run_url_extraction(url, provider=provider)
        return outcome.recipe

    async def extract_from_image(
        self,
        image_base64: str,
        *,
        provider: Provider | None = None,
    ) -> ExtractedRecipe:
        """Extract a recipe from a base64-encoded photo of a recipe card.

        Raises:
            LLMConfigurationError: If the provider has no credential.
            LLMRequestError: If the model call fails or returns no text.
            MalformedResponseError: If the model text is not JSON.
            EmptyResponseError: If the model output holds no recipe.
        """
        outcome = await self.run_image_extraction(image_base64, provider=provider)
        return outcome.recipe

    async def run_url_extraction(
        self,
        url: str,
        *,
        provider: Provider | None = None,
    ) -> ExtractionOutcome:
        """Run a URL extraction and return the recipe with diagnostics."""
        trail = _StateTrail(ExtractionSource.URL, self._resolve_provider(provider))
        logger.info("Starting URL extraction", url=url, provider=str(trail.provider))

        try:
            client = self._client_for(trail.provider)

            trail.enter(ExtractionState.ACQUIRE_CLIENT_SIDE)
            acquired = await self._acquirer.acquire(url)

            if (
                not acquired.scrape_succeeded
                and self._settings.extraction.server_side_acquisition_enabled
            ):
                trail.enter(ExtractionState.ACQUIRE_SERVER_SIDE)
                acquired = await self._acquirer.acquire_server_side(url, acquired)

            if acquired.degraded:
                logger.warning(
                    "Acquisition degraded, extracting from metadata hints only",
                    url=url,
                    has_caption=acquired.social_caption is not None,
                )

            trail.enter(ExtractionState.BUILD_REQUEST)
            request = self._request_builder.build_for_content(
                url, acquired, trail.provider
            )

            return await self._complete(
                trail,
                client,
                request,
                candidate_image_url=acquired.candidate_image_url,
                degraded=acquired.degraded,
            )
        except Exception as e:
            self._fail(trail, e, url=url)
            raise

    async def run_image_extraction(
        self,
        image_base64: str,
        *,
        provider: Provider | None = None,
    ) -> ExtractionOutcome:
        """Run an image extraction and return the recipe with diagnostics."""
        trail = _StateTrail(ExtractionSource.IMAGE, self._resolve_provider(provider))
        logger.info(
            "Starting image extraction",
            provider=str(trail.provider),
            image_chars=len(image_base64),
        )

        try:
            client = self._client_for(trail.provider)

            trail.enter(ExtractionState.BUILD_REQUEST)
            request = self._request_builder.build_for_image(
                image_base64, trail.provider
            )

            return await self._complete(trail, client, request)
        except Exception as e:
            self._fail(trail, e)
            raise

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _resolve_provider(self, provider: Provider | None) -> Provider:
        return provider or self._settings.llm.default_provider

    def _client_for(self, provider: Provider) -> ModelClientProtocol:
        """Return the memoized client for ``provider``.

        Raises:
            LLMConfigurationError: If the provider has no credential.
        """
        client = self._clients.get(provider)
        if client is None:
            client = self._client_factory(provider, self._settings)
            self._clients[provider] = client
        return client

    async def _complete(
        self,
        trail: _StateTrail,
        client: ModelClientProtocol,
        request: ExtractionRequest,
        *,
        candidate_image_url: str | None = None,
        degraded: bool = False,
    ) -> ExtractionOutcome:
        trail.enter(ExtractionState.CALL_MODEL)
        completion = await client.complete(request)

        trail.enter(ExtractionState.NORMALIZE)
        normalized = self._normalizer.normalize(
            completion.raw_response,
            candidate_image_url=candidate_image_url,
        )

        trail.enter(ExtractionState.DONE)
        outcome = ExtractionOutcome(
            recipe=normalized.recipe,
            source=trail.source,
            provider=str(trail.provider),
            states=trail.states,
            degraded=degraded,
            defaults_applied=normalized.defaults_applied,
        )
        self._telemetry.record_success(outcome)

        logger.info(
            "Extraction completed",
            source=str(trail.source),
            provider=str(trail.provider),
            title=outcome.recipe.title,
            ingredients=len(outcome.recipe.ingredients),
            steps=len(outcome.recipe.steps),
            degraded=degraded,
        )
        return outcome

    def _fail(self, trail: _StateTrail, error: Exception, **context: str) -> None:
        failed_in = trail.current
        trail.enter(ExtractionState.FAILED)
        logger.warning(
            "Extraction failed",
            source=str(trail.source),
            provider=str(trail.provider),
            failed_in=str(failed_in),
            error_type=type(error).__name__,
            error=str(error),
            **context,
        )
        self._telemetry.record_failure(
            source=str(trail.source),
            provider=str(trail.provider),
            error=error,
        )
