"""Content acquisition service.

This module walks the acquisition ladder for a source URL:
1. Platform metadata API (TikTok captions and covers)
2. Open Graph link preview
3. Rendering proxy text (Jina Reader)
4. Direct fetch with rotating user agents (server side)
5. Search-engine snippet (server side, last resort)

Strategies run sequentially, each inside its own error boundary. A
blocked or unreachable site degrades to empty content; nothing here raises
for network trouble.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import httpx

from recipe_extraction.core.config import get_settings
from recipe_extraction.observability.logging import get_logger
from recipe_extraction.services.acquisition.exceptions import (
    ContentRejectedError,
    FetchError,
)
from recipe_extraction.services.acquisition.html import html_to_text
from recipe_extraction.services.acquisition.jsonld import extract_recipe_jsonld_text
from recipe_extraction.services.acquisition.models import (
    AcquiredContent,
    AcquisitionStrategy,
    CaptionOrigin,
    LinkPreview,
    PlatformMetadata,
)
from recipe_extraction.services.acquisition.platforms import (
    is_tiktok_url,
    parse_tikwm_response,
)
from recipe_extraction.services.acquisition.preview import parse_link_preview


if TYPE_CHECKING:
    from recipe_extraction.core.config.settings import AcquisitionSettings


logger = get_logger(__name__)

_HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
_PATH_WORD_SPLIT = re.compile(r"[^A-Za-z]+")
_SEARCH_KEYWORDS = ("ingredient", "instruction")


class ContentAcquirer:
    """Produces the best available ``AcquiredContent`` for a URL.

    ``acquire`` runs the lightweight client-side rungs. The orchestrator
    calls ``acquire_server_side`` only when that attempt reports
    ``scrape_succeeded=False``.

    Example:
        ```python
        acquirer = ContentAcquirer()
        await acquirer.initialize()

        content = await acquirer.acquire("https://example.com/recipe")
        if not content.scrape_succeeded:
            content = await acquirer.acquire_server_side(url, content)

        await acquirer.shutdown()
        ```
    """

    def __init__(self, settings: AcquisitionSettings | None = None) -> None:
        """Initialize the acquirer.

        Args:
            settings: Acquisition settings; defaults to the application's.
        """
        self._settings = settings or get_settings().acquisition
        self._http_client: httpx.AsyncClient | None = None

    async def initialize(self) -> None:
        """Initialize the HTTP client. Safe to call more than once."""
        if self._http_client is not None:
            return

        # Each request passes its own timeout; this is only the ceiling
        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._settings.reader_timeout),
            follow_redirects=True,
            headers={
                "User-Agent": self._settings.user_agent,
                "Accept-Language": "en-US,en;q=0.5",
            },
        )
        logger.info("ContentAcquirer initialized")

    async def shutdown(self) -> None:
        """Release resources."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
        logger.debug("ContentAcquirer shutdown")

    # -------------------------------------------------------------------------
    # Ladders
    # -------------------------------------------------------------------------

    async def acquire(self, url: str) -> AcquiredContent:
        """Run the client-side ladder (platform API, link preview, reader).

        Args:
            url: Source page or social post URL.

        Returns:
            AcquiredContent. ``scrape_succeeded`` is True when page text was
            obtained, or when a platform API supplied the caption.
        """
        content = AcquiredContent()

        if is_tiktok_url(url):
            metadata = await self._try_platform_metadata(url)
            if metadata is not None:
                self._apply_platform_metadata(content, metadata)
                # The caption is the recipe source for platform posts
                content.scrape_succeeded = metadata.caption is not None
            if not content.has_hints:
                self._apply_preview(content, await self._try_link_preview(url))
        else:
            self._apply_preview(content, await self._try_link_preview(url))
            text = await self._try_reader(url)
            if text is not None:
                content.raw_text = text
                content.strategy = AcquisitionStrategy.READER
                content.scrape_succeeded = True

        logger.info(
            "Client-side acquisition finished",
            url=url,
            strategy=content.strategy,
            scrape_succeeded=content.scrape_succeeded,
            text_chars=len(content.raw_text),
            has_caption=content.social_caption is not None,
            has_image=content.candidate_image_url is not None,
        )
        return content

    async def acquire_server_side(
        self,
        url: str,
        hints: AcquiredContent | None = None,
    ) -> AcquiredContent:
        """Run the heavyweight ladder (direct fetch, then search snippet).

        Args:
            url: Source page URL.
            hints: Result of the client-side attempt; its caption and
                thumbnail are carried over.

        Returns:
            A new AcquiredContent merging ``hints`` with any text found.
        """
        content = hints.model_copy() if hints is not None else AcquiredContent()

        fetched = await self._try_direct_fetch(url)
        if fetched is not None:
            text, strategy, preview = fetched
            content.raw_text = text
            content.strategy = strategy
            content.scrape_succeeded = True
            if content.candidate_image_url is None and preview is not None:
                content.candidate_image_url = preview.first_image
        else:
            snippet = await self._try_search_snippet(url)
            if snippet is not None:
                content.raw_text = snippet
                content.strategy = AcquisitionStrategy.SEARCH_SNIPPET
                content.scrape_succeeded = True

        logger.info(
            "Server-side acquisition finished",
            url=url,
            strategy=content.strategy,
            scrape_succeeded=content.scrape_succeeded,
            text_chars=len(content.raw_text),
        )
        return content

    # -------------------------------------------------------------------------
    # Strategies
    # -------------------------------------------------------------------------

    async def _try_platform_metadata(self, url: str) -> PlatformMetadata | None:
        """Query the TikWM API for caption and cover."""
        try:
            response = await self._get(
                self._settings.platform_api_url,
                timeout=self._settings.platform_timeout,
                params={"url": url},
            )
            metadata = parse_tikwm_response(response.json())
        except Exception as e:
            logger.warning("Platform metadata lookup failed", url=url, error=str(e))
            return None

        if metadata is None:
            logger.debug("Platform metadata response had no data", url=url)
        return metadata

    async def _try_link_preview(self, url: str) -> LinkPreview | None:
        """Read Open Graph metadata from the page."""
        try:
            response = await self._get(
                url,
                timeout=self._settings.preview_timeout,
                headers={"Accept": _HTML_ACCEPT},
            )
            return parse_link_preview(response.text, str(response.url))
        except Exception as e:
            logger.warning("Link preview failed", url=url, error=str(e))
            return None

    async def _try_reader(self, url: str) -> str | None:
        """Fetch rendered page text through the reader proxy."""
        try:
            response = await self._get(
                f"{self._settings.reader_url}{url}",
                timeout=self._settings.reader_timeout,
                headers={"Accept": "text/event-stream, text/plain"},
            )
            text = response.text
            self._validate_text(text)
        except Exception as e:
            logger.warning("Reader fetch failed", url=url, error=str(e))
            return None

        logger.debug("Reader fetch succeeded", url=url, chars=len(text))
        return text

    async def _try_direct_fetch(
        self, url: str
    ) -> tuple[str, AcquisitionStrategy, LinkPreview | None] | None:
        """GET the page with each rotating user agent until one works.

        JSON-LD Recipe data wins over stripped page text when present.
        """
        for attempt, user_agent in enumerate(self._settings.rotating_user_agents, 1):
            try:
                response = await self._get(
                    url,
                    timeout=self._settings.direct_fetch_timeout,
                    headers={"User-Agent": user_agent, "Accept": _HTML_ACCEPT},
                )
                html = response.text
                preview = parse_link_preview(html, str(response.url))

                structured = extract_recipe_jsonld_text(html)
                if structured is not None:
                    logger.info("Found JSON-LD recipe", url=url, attempt=attempt)
                    return structured, AcquisitionStrategy.STRUCTURED_DATA, preview

                text = html_to_text(html, self._settings.max_page_chars)
                self._validate_text(text)
            except Exception as e:
                logger.warning(
                    "Direct fetch attempt failed",
                    url=url,
                    attempt=attempt,
                    error=str(e),
                )
                continue

            logger.info("Direct fetch succeeded", url=url, attempt=attempt)
            return text, AcquisitionStrategy.DIRECT_FETCH, preview

        return None

    async def _try_search_snippet(self, url: str) -> str | None:
        """Use search-result snippets for the page as a last resort."""
        query = build_search_query(url)
        try:
            response = await self._get(
                self._settings.search_url,
                timeout=self._settings.search_timeout,
                params={"q": query},
                headers={
                    "User-Agent": self._settings.rotating_user_agents[0],
                    "Accept": _HTML_ACCEPT,
                },
            )
            text = html_to_text(response.text, self._settings.max_page_chars)
        except Exception as e:
            logger.warning("Search snippet fetch failed", url=url, error=str(e))
            return None

        lowered = text.lower()
        if len(text) <= self._settings.search_min_chars or not any(
            keyword in lowered for keyword in _SEARCH_KEYWORDS
        ):
            logger.debug("Search snippet not usable", url=url, chars=len(text))
            return None

        logger.info("Using search snippet", url=url, chars=len(text))
        return text

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _get(
        self,
        url: str,
        *,
        timeout: float,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """GET ``url`` under ``timeout``.

        Raises:
            FetchError: If the response is not 2xx.
            httpx.HTTPError: On transport failures and timeouts.
        """
        if self._http_client is None:
            await self.initialize()
        assert self._http_client is not None

        response = await self._http_client.get(
            url,
            params=params,
            headers=headers,
            timeout=httpx.Timeout(timeout),
        )
        if not response.is_success:
            msg = f"HTTP {response.status_code} from {response.url.host}"
            raise FetchError(msg)
        return response

    def _validate_text(self, text: str) -> None:
        """Reject implausibly short text and bot-challenge pages.

        Raises:
            ContentRejectedError: If the text is not usable page content.
        """
        stripped = text.strip()
        if len(stripped) < self._settings.min_content_chars:
            msg = f"Content too short ({len(stripped)} chars)"
            raise ContentRejectedError(msg)

        lowered = stripped.lower()
        for marker in self._settings.bot_challenge_markers:
            if marker in lowered:
                msg = f"Bot challenge page detected ({marker!r})"
                raise ContentRejectedError(msg)

    @staticmethod
    def _apply_platform_metadata(
        content: AcquiredContent, metadata: PlatformMetadata
    ) -> None:
        if metadata.caption:
            content.social_caption = metadata.caption
            content.caption_origin = CaptionOrigin.PLATFORM
        if metadata.cover_url:
            content.candidate_image_url = metadata.cover_url

    @staticmethod
    def _apply_preview(content: AcquiredContent, preview: LinkPreview | None) -> None:
        if preview is None:
            return
        if content.candidate_image_url is None:
            content.candidate_image_url = preview.first_image
        if content.social_caption is None and preview.description:
            content.social_caption = preview.description
            content.social_title = preview.title
            content.caption_origin = CaptionOrigin.OPEN_GRAPH


def build_search_query(url: str) -> str:
    """Build a site-restricted search query from a URL's domain and path.

    Example:
        ``https://www.example.com/recipes/easy-tomato-soup/`` becomes
        ``site:example.com easy tomato soup recipe``.
    """
    parsed = urlparse(url)
    domain = (parsed.hostname or "").removeprefix("www.")
    words = [
        word.lower()
        for word in _PATH_WORD_SPLIT.split(parsed.path)
        if len(word) > 2 and word.lower() not in {"recipe", "recipes", "www", "html"}
    ]
    return " ".join(part for part in (f"site:{domain}", *words, "recipe") if part)
