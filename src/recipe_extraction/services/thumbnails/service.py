"""Thumbnail resolution cascade.

Always produces a local image path, trying in strict order:

1. Validate the candidate URL with a HEAD request, then download it.
2. Capture frames from the embedded video player at fixed offsets and keep
   the temporal-median frame (YouTube only; other platforms do not expose a
   directly playable embed).
3. Fall back to the default placeholder.

Every failed step is logged and the next step runs. Only disk failures while
writing the placeholder propagate.
"""

from __future__ import annotations

import asyncio
import mimetypes
from pathlib import PurePosixPath
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

import httpx
from playwright.async_api import Error as PlaywrightError

from recipe_extraction.core.config import get_settings
from recipe_extraction.observability.logging import get_logger
from recipe_extraction.observability.metrics import THUMBNAIL_RESOLUTIONS_TOTAL
from recipe_extraction.schemas.enums import Platform
from recipe_extraction.schemas.recipe import ScreenshotCandidate
from recipe_extraction.services.browser.exceptions import BrowserError
from recipe_extraction.services.thumbnails.exceptions import (
    FrameCaptureError,
    ThumbnailDownloadError,
    ThumbnailError,
)
from recipe_extraction.services.thumbnails.models import (
    ThumbnailResolution,
    ThumbnailSource,
)
from recipe_extraction.services.thumbnails.storage import (
    LocalImageStorage,
    is_decodable_image,
)


if TYPE_CHECKING:
    from recipe_extraction.services.browser.manager import BrowserManager


logger = get_logger(__name__)

YOUTUBE_EMBED_URL = "https://www.youtube.com/embed/{video_id}?autoplay=1&mute=1&start={start}"
_IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".webp", ".gif"})


def select_representative_frame[T](frames: list[T]) -> T:
    """Pick the temporal-median frame (middle index of the captures).

    Frames are expected in capture order. This is a stand-in for real
    content-based selection.
    """
    if not frames:
        msg = "No frames to select from"
        raise FrameCaptureError(msg)
    return frames[len(frames) // 2]


def guess_extension(url: str, content_type: str | None) -> str:
    """File extension from the URL path, else the content type, else .jpg."""
    suffix = PurePosixPath(urlsplit(url).path).suffix.lower()
    if suffix in _IMAGE_EXTENSIONS:
        return suffix
    if content_type:
        guessed = mimetypes.guess_extension(content_type.split(";")[0].strip())
        if guessed in _IMAGE_EXTENSIONS:
            return guessed
    return ".jpg"


def _is_image_content_type(content_type: str | None) -> bool:
    return bool(content_type) and content_type.lower().startswith("image/")


class ThumbnailResolver:
    """Resolve a thumbnail for a post through the fallback cascade."""

    def __init__(
        self,
        storage: LocalImageStorage,
        browser: BrowserManager | None = None,
    ) -> None:
        settings = get_settings()
        self._settings = settings.thumbnails
        self._user_agent = settings.browser.user_agent
        self.storage = storage
        self._browser = browser
        self._client: httpx.AsyncClient | None = None

    async def initialize(self) -> None:
        """Create the HTTP client and make sure the placeholder exists."""
        self._client = httpx.AsyncClient(
            follow_redirects=True,
            headers={"User-Agent": self._user_agent},
        )
        await self.storage.ensure_default()
        logger.info(
            "ThumbnailResolver initialized",
            uploads_root=str(self.storage.root),
            capture_enabled=self._settings.capture_enabled and self._browser is not None,
        )

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def resolve_thumbnail(
        self,
        candidate_url: str | None = None,
        content_id: str | None = None,
        *,
        platform: Platform | None = None,
    ) -> str:
        """Return a local thumbnail path; never raises for network failures."""
        resolution = await self.resolve(candidate_url, content_id, platform=platform)
        return resolution.path

    async def resolve(
        self,
        candidate_url: str | None = None,
        content_id: str | None = None,
        *,
        platform: Platform | None = None,
        keep_candidates: bool = False,
    ) -> ThumbnailResolution:
        """Run the cascade.

        Args:
            candidate_url: Image URL from oEmbed or page metadata.
            content_id: Video ID used for frame capture.
            platform: Platform of ``content_id``; capture needs YouTube.
            keep_candidates: Keep every captured frame and return them as
                screenshot candidates instead of deleting the extras.
        """
        if candidate_url:
            try:
                path = await self._download(candidate_url)
            except ThumbnailError as e:
                logger.warning(
                    "Thumbnail download failed",
                    url=candidate_url,
                    error=str(e),
                )
            else:
                return self._resolved(path, ThumbnailSource.DOWNLOADED)

        if content_id and self._can_capture(platform):
            try:
                return await self._capture(content_id, keep_candidates=keep_candidates)
            except (ThumbnailError, BrowserError, PlaywrightError) as e:
                logger.warning(
                    "Frame capture failed",
                    content_id=content_id,
                    platform=platform,
                    error=str(e),
                )
        elif content_id:
            logger.debug(
                "Frame capture not available for platform",
                content_id=content_id,
                platform=platform,
            )

        path = await self.storage.ensure_default()
        return self._resolved(path, ThumbnailSource.DEFAULT)

    def _can_capture(self, platform: Platform | None) -> bool:
        return (
            platform == Platform.YOUTUBE
            and self._settings.capture_enabled
            and self._browser is not None
        )

    @staticmethod
    def _resolved(
        path: str,
        source: ThumbnailSource,
        candidates: list[ScreenshotCandidate] | None = None,
    ) -> ThumbnailResolution:
        THUMBNAIL_RESOLUTIONS_TOTAL.labels(source=source).inc()
        return ThumbnailResolution(path=path, source=source, candidates=candidates or [])

    # -------------------------------------------------------------------------
    # Step 1: validate and download
    # -------------------------------------------------------------------------

    async def _download(self, url: str) -> str:
        if self._client is None:
            await self.initialize()
        assert self._client is not None

        try:
            head = await self._client.head(url, timeout=self._settings.check_timeout)
            head.raise_for_status()
        except httpx.HTTPStatusError as e:
            reason = f"HEAD returned {e.response.status_code}"
            raise ThumbnailDownloadError(url, reason) from e
        except httpx.HTTPError as e:
            raise ThumbnailDownloadError(url, f"HEAD failed ({e!r})") from e
        except httpx.InvalidURL as e:
            raise ThumbnailDownloadError(url, "Malformed URL") from e

        if not _is_image_content_type(head.headers.get("content-type")):
            reason = f"Not an image ({head.headers.get('content-type')})"
            raise ThumbnailDownloadError(url, reason)

        try:
            response = await self._client.get(url, timeout=self._settings.download_timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            reason = f"GET returned {e.response.status_code}"
            raise ThumbnailDownloadError(url, reason) from e
        except httpx.HTTPError as e:
            raise ThumbnailDownloadError(url, f"GET failed ({e!r})") from e

        content_type = response.headers.get("content-type")
        if not _is_image_content_type(content_type):
            raise ThumbnailDownloadError(url, f"Not an image ({content_type})")
        if not await asyncio.to_thread(is_decodable_image, response.content):
            raise ThumbnailDownloadError(url, "Image data could not be decoded")

        path = await self.storage.save(response.content, guess_extension(url, content_type))
        logger.info("Thumbnail downloaded", url=url, path=path)
        return path

    # -------------------------------------------------------------------------
    # Step 2: capture video frames
    # -------------------------------------------------------------------------

    async def capture_frames(self, video_id: str) -> list[ScreenshotCandidate]:
        """Screenshot the embedded player at each configured offset.

        Offsets that fail are skipped; the rest are returned in time order.
        Capture stops once ``frame_capture_budget`` seconds have passed.

        Raises:
            FrameCaptureError: If not a single frame was captured.
            BrowserUnavailableError: If the browser cannot be launched.
        """
        if self._browser is None:
            msg = "No browser configured for frame capture"
            raise FrameCaptureError(msg)

        frames: list[ScreenshotCandidate] = []
        budget = self._settings.frame_capture_budget
        try:
            async with asyncio.timeout(budget), self._browser.new_page() as page:
                for timestamp in self._settings.frame_timestamps:
                    url = YOUTUBE_EMBED_URL.format(video_id=video_id, start=timestamp)
                    try:
                        await page.goto(url, wait_until="domcontentloaded")
                        await asyncio.sleep(self._settings.frame_settle_seconds)
                        image = await page.screenshot(type="jpeg", quality=85)
                    except PlaywrightError as e:
                        logger.debug(
                            "Frame capture attempt failed",
                            video_id=video_id,
                            timestamp=timestamp,
                            error=str(e),
                        )
                        continue
                    path = await self.storage.save(image, ".jpg")
                    frames.append(
                        ScreenshotCandidate(path=path, timestamp_seconds=timestamp)
                    )
        except TimeoutError:
            # Keep whatever was captured before the budget ran out
            logger.warning(
                "Frame capture budget exhausted",
                video_id=video_id,
                budget=budget,
                captured=len(frames),
            )

        if not frames:
            msg = f"No frames captured for video {video_id}"
            raise FrameCaptureError(msg)
        logger.info("Captured video frames", video_id=video_id, count=len(frames))
        return frames

    async def _capture(self, video_id: str, *, keep_candidates: bool) -> ThumbnailResolution:
        frames = await self.capture_frames(video_id)
        chosen = select_representative_frame(frames)

        if keep_candidates:
            return self._resolved(chosen.path, ThumbnailSource.CAPTURED_FRAME, frames)

        for frame in frames:
            if frame.path != chosen.path:
                await self.storage.delete(frame.path)
        return self._resolved(chosen.path, ThumbnailSource.CAPTURED_FRAME)
