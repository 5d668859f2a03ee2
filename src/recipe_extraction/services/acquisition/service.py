"""Content acquisition for social-media posts.

Gathers the richest text available for a post plus a local thumbnail:

- YouTube: oEmbed metadata, then transcript and thumbnail concurrently. The
  watch page is scraped up front when oEmbed fails, so its og:image can
  feed the thumbnail, and afterwards when there is no transcript.
- TikTok / Instagram: the post page is scraped for Open Graph metadata; a
  templated description replaces it when scraping fails.

Failures of individual sources are logged and replaced by the next best
source; acquisition itself only fails for unsupported matches.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from pydantic import ValidationError

from recipe_extraction.core.config import get_settings
from recipe_extraction.observability.logging import get_logger
from recipe_extraction.schemas.enums import Platform
from recipe_extraction.services.acquisition.exceptions import (
    AcquisitionError,
    MetadataFetchError,
    ScrapingError,
    ScrapingTimeoutError,
    TranscriptUnavailableError,
)
from recipe_extraction.services.acquisition.models import (
    AcquiredContent,
    OEmbedMetadata,
    PageMetadata,
)
from recipe_extraction.services.acquisition.page_parser import parse_page_metadata
from recipe_extraction.services.acquisition.templates import (
    build_fallback_text,
    build_social_text,
    build_youtube_text,
)
from recipe_extraction.services.acquisition.transcripts import TranscriptFetcher
from recipe_extraction.services.browser.exceptions import BrowserError


if TYPE_CHECKING:
    from recipe_extraction.services.browser.manager import BrowserManager
    from recipe_extraction.services.platforms.models import PlatformMatch
    from recipe_extraction.services.thumbnails.models import ThumbnailResolution
    from recipe_extraction.services.thumbnails.service import ThumbnailResolver


logger = get_logger(__name__)

# Elements that signal the page rendered enough to read metadata
_READY_SELECTORS = {
    Platform.YOUTUBE: "#description-inline-expander, #description, meta[property='og:title']",
    Platform.TIKTOK: "meta[property='og:title']",
    Platform.INSTAGRAM: "meta[property='og:title']",
}


class ContentAcquisitionService:
    """Acquire post text and thumbnail for a resolved ``PlatformMatch``."""

    def __init__(
        self,
        browser: BrowserManager,
        thumbnails: ThumbnailResolver,
        transcripts: TranscriptFetcher | None = None,
    ) -> None:
        settings = get_settings()
        self._settings = settings.acquisition
        self._browser_settings = settings.browser
        self._browser = browser
        self._thumbnails = thumbnails
        self._transcripts = transcripts or TranscriptFetcher(
            self._settings.transcript_languages,
            timeout=self._settings.transcript_timeout,
            max_chars=self._settings.transcript_max_chars,
        )
        self._client: httpx.AsyncClient | None = None

    async def initialize(self) -> None:
        """Create the HTTP client used for oEmbed lookups."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._settings.oembed_timeout),
            follow_redirects=True,
            headers={"User-Agent": self._browser_settings.user_agent},
        )
        logger.info("ContentAcquisitionService initialized")

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def acquire_content(
        self,
        match: PlatformMatch,
        *,
        capture_screenshot_options: bool = False,
    ) -> AcquiredContent:
        """Gather text and thumbnail for a post.

        Args:
            match: Supported platform match.
            capture_screenshot_options: Keep all captured video frames as
                screenshot candidates when frame capture is used.

        Raises:
            AcquisitionError: If the match is not for a supported platform.
        """
        if not match.is_supported:
            msg = f"Cannot acquire content for {match.platform} URL {match.source_url}"
            raise AcquisitionError(msg)

        if match.platform is Platform.YOUTUBE:
            return await self._acquire_youtube(match, capture_screenshot_options)
        return await self._acquire_social(match, capture_screenshot_options)

    # -------------------------------------------------------------------------
    # YouTube
    # -------------------------------------------------------------------------

    async def _acquire_youtube(
        self, match: PlatformMatch, keep_candidates: bool
    ) -> AcquiredContent:
        video_id = match.content_id
        oembed = await self._oembed_or_none(video_id)

        # Without oEmbed the watch page is the only source of a thumbnail URL
        page: PageMetadata | None = None
        scrape_attempted = False
        if oembed is None or not oembed.title:
            page = await self._scrape_or_none(match)
            scrape_attempted = True

        thumbnail_url = (oembed.thumbnail_url if oembed else None) or (
            page.image if page else None
        )
        transcript, thumbnail = await asyncio.gather(
            self._transcript_or_none(video_id),
            self._thumbnails.resolve(
                thumbnail_url,
                video_id,
                platform=Platform.YOUTUBE,
                keep_candidates=keep_candidates,
            ),
        )

        if transcript is None and not scrape_attempted:
            page = await self._scrape_or_none(match)

        title = (
            (oembed.title if oembed else None)
            or (page.title if page else None)
            or f"YouTube video {video_id}"
        )
        creator = (oembed.author_name if oembed else None) or (
            page.author if page else None
        )
        text = build_youtube_text(
            title=title,
            creator=creator,
            description=page.description if page else None,
            transcript=transcript,
        )
        return self._content(
            text,
            title=title,
            thumbnail_url=thumbnail_url,
            thumbnail=thumbnail,
            has_transcript=transcript is not None,
        )

    async def fetch_oembed(self, video_id: str) -> OEmbedMetadata:
        """Fetch YouTube oEmbed metadata.

        Raises:
            MetadataFetchError: On HTTP errors, timeouts or malformed bodies.
        """
        if self._client is None:
            await self.initialize()
        assert self._client is not None

        params = {
            "url": f"https://www.youtube.com/watch?v={video_id}",
            "format": "json",
        }
        try:
            response = await self._client.get(self._settings.oembed_url, params=params)
            response.raise_for_status()
            return OEmbedMetadata.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            msg = f"oEmbed returned {e.response.status_code} for {video_id}"
            raise MetadataFetchError(msg) from e
        except httpx.HTTPError as e:
            msg = f"oEmbed request for {video_id} failed: {e!r}"
            raise MetadataFetchError(msg) from e
        except (ValueError, ValidationError) as e:
            msg = f"oEmbed body for {video_id} is not valid JSON metadata"
            raise MetadataFetchError(msg) from e

    async def _oembed_or_none(self, video_id: str) -> OEmbedMetadata | None:
        try:
            return await self.fetch_oembed(video_id)
        except MetadataFetchError as e:
            logger.warning("oEmbed lookup failed", video_id=video_id, error=str(e))
            return None

    async def _transcript_or_none(self, video_id: str) -> str | None:
        try:
            return await self._transcripts.fetch(video_id)
        except TranscriptUnavailableError as e:
            logger.info("Transcript unavailable", video_id=video_id, error=str(e))
            return None

    # -------------------------------------------------------------------------
    # TikTok / Instagram
    # -------------------------------------------------------------------------

    async def _acquire_social(
        self, match: PlatformMatch, keep_candidates: bool
    ) -> AcquiredContent:
        page = await self._scrape_or_none(match)
        author = (page.author if page else None) or match.secondary_id

        if page is not None and page.has_content:
            text = build_social_text(
                match, title=page.title, author=author, caption=page.description
            )
        else:
            text = build_fallback_text(match, author)

        thumbnail_url = page.image if page else None
        thumbnail = await self._thumbnails.resolve(
            thumbnail_url,
            match.content_id,
            platform=match.platform,
            keep_candidates=keep_candidates,
        )
        return self._content(
            text,
            title=page.title if page else None,
            thumbnail_url=thumbnail_url,
            thumbnail=thumbnail,
            has_transcript=False,
        )

    # -------------------------------------------------------------------------
    # Browser scraping
    # -------------------------------------------------------------------------

    async def scrape_page(self, match: PlatformMatch) -> PageMetadata:
        """Render the post page and parse its metadata.

        Raises:
            ScrapingTimeoutError: If navigation exceeds its budget.
            ScrapingError: If the browser is unavailable or navigation fails.
        """
        url = match.canonical_url
        budget = self._browser_settings.navigation_timeout + (
            self._browser_settings.selector_timeout * 2
        )
        try:
            async with asyncio.timeout(budget), self._browser.new_page() as page:
                await page.goto(url, wait_until="domcontentloaded")
                try:
                    await page.wait_for_selector(
                        _READY_SELECTORS[match.platform], state="attached"
                    )
                except PlaywrightTimeoutError:
                    logger.debug("Metadata elements did not appear", url=url)
                html = await page.content()
                document_title = await page.title()
        except (PlaywrightTimeoutError, TimeoutError) as e:
            raise ScrapingTimeoutError(url, "Page load timed out") from e
        except BrowserError as e:
            raise ScrapingError(url, f"Browser unavailable ({e})") from e
        except PlaywrightError as e:
            raise ScrapingError(url, f"Navigation failed ({e.message})") from e

        return parse_page_metadata(html, match.platform, document_title=document_title)

    async def _scrape_or_none(self, match: PlatformMatch) -> PageMetadata | None:
        try:
            return await self.scrape_page(match)
        except ScrapingError as e:
            logger.warning(
                "Page scraping failed",
                platform=match.platform,
                content_id=match.content_id,
                error=str(e),
            )
            return None

    @staticmethod
    def _content(
        text: str,
        *,
        title: str | None,
        thumbnail_url: str | None,
        thumbnail: ThumbnailResolution,
        has_transcript: bool,
    ) -> AcquiredContent:
        return AcquiredContent(
            text=text,
            title=title,
            thumbnail_url=thumbnail_url,
            thumbnail_local_path=thumbnail.path,
            screenshot_candidates=thumbnail.candidates,
            has_transcript=has_transcript,
        )
