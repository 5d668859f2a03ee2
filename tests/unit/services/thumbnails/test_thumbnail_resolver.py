"""Unit tests for ThumbnailResolver.

Tests cover:
- Download with HEAD validation
- Fallback to the placeholder for every download failure
- Frame capture and temporal-median selection
- Screenshot candidates
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import respx
from playwright.async_api import Error as PlaywrightError

from recipe_extraction.schemas.enums import Platform
from recipe_extraction.services.thumbnails import (
    FrameCaptureError,
    LocalImageStorage,
    ThumbnailResolver,
    ThumbnailSource,
    select_representative_frame,
)
from recipe_extraction.services.thumbnails.service import guess_extension
from recipe_extraction.services.thumbnails.storage import render_placeholder


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path


pytestmark = pytest.mark.unit

IMAGE_URL = "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg"
JPEG = render_placeholder((64, 36))


def fake_browser(page: MagicMock) -> MagicMock:
    """Browser manager whose new_page yields ``page``."""

    @asynccontextmanager
    async def new_page(**_: Any):
        yield page

    browser = MagicMock()
    browser.new_page = MagicMock(side_effect=new_page)
    return browser


def fake_page(screenshots: list[bytes | Exception]) -> MagicMock:
    """Page whose screenshots return the given results in order."""
    page = MagicMock()
    page.goto = AsyncMock()
    page.screenshot = AsyncMock(side_effect=screenshots)
    return page


@pytest.fixture
def storage(tmp_path: Path) -> LocalImageStorage:
    """Create storage rooted in a temp directory."""
    return LocalImageStorage(tmp_path / "uploads")


@pytest.fixture
async def resolver(storage: LocalImageStorage) -> AsyncGenerator[ThumbnailResolver]:
    """Create an initialized resolver without a browser."""
    resolver = ThumbnailResolver(storage)
    await resolver.initialize()
    yield resolver
    await resolver.shutdown()


def enable_capture(resolver: ThumbnailResolver, timestamps: list[int]) -> None:
    """Turn on frame capture with the given offsets."""
    resolver._settings = resolver._settings.model_copy(
        update={
            "capture_enabled": True,
            "frame_timestamps": timestamps,
            "frame_settle_seconds": 0.0,
        }
    )


class TestHelpers:
    """Tests for module helpers."""

    def test_select_median_frame(self) -> None:
        """Should pick the middle capture."""
        assert select_representative_frame([15, 30, 45]) == 30
        assert select_representative_frame([15, 30, 45, 60]) == 45
        assert select_representative_frame(["only"]) == "only"

    def test_select_from_no_frames_raises(self) -> None:
        """Should raise when nothing was captured."""
        with pytest.raises(FrameCaptureError):
            select_representative_frame([])

    @pytest.mark.parametrize(
        ("url", "content_type", "expected"),
        [
            ("https://cdn.example.com/a.PNG", None, ".png"),
            ("https://cdn.example.com/a.webp?x=1", "image/jpeg", ".webp"),
            ("https://cdn.example.com/image", "image/png", ".png"),
            ("https://cdn.example.com/image", "application/octet-stream", ".jpg"),
            ("https://cdn.example.com/image", None, ".jpg"),
        ],
    )
    def test_guess_extension(
        self, url: str, content_type: str | None, expected: str
    ) -> None:
        """Should prefer the URL suffix, then the content type."""
        assert guess_extension(url, content_type) == expected


class TestDownload:
    """Tests for the download step."""

    @respx.mock
    async def test_downloads_valid_image(
        self, resolver: ThumbnailResolver, storage: LocalImageStorage
    ) -> None:
        """Should validate, download and store the candidate image."""
        respx.head(IMAGE_URL).mock(
            return_value=httpx.Response(200, headers={"content-type": "image/jpeg"})
        )
        respx.get(IMAGE_URL).mock(
            return_value=httpx.Response(
                200, content=JPEG, headers={"content-type": "image/jpeg"}
            )
        )

        resolution = await resolver.resolve(IMAGE_URL)

        assert resolution.source is ThumbnailSource.DOWNLOADED
        assert resolution.path != storage.default_path
        assert storage.local_path(resolution.path).read_bytes() == JPEG

    @pytest.mark.parametrize(
        ("head", "get"),
        [
            (httpx.Response(404), None),
            (httpx.Response(200, headers={"content-type": "text/html"}), None),
            (
                httpx.Response(200, headers={"content-type": "image/jpeg"}),
                httpx.Response(500),
            ),
            (
                httpx.Response(200, headers={"content-type": "image/jpeg"}),
                httpx.Response(
                    200, content=b"not a jpeg", headers={"content-type": "image/jpeg"}
                ),
            ),
        ],
    )
    async def test_bad_candidates_fall_back_to_default(
        self,
        resolver: ThumbnailResolver,
        storage: LocalImageStorage,
        head: httpx.Response,
        get: httpx.Response | None,
    ) -> None:
        """Should use the placeholder when the candidate is unusable."""
        async with respx.mock(assert_all_called=False) as router:
            head_route = router.head(IMAGE_URL).mock(return_value=head)
            get_route = router.get(IMAGE_URL).mock(
                return_value=get or httpx.Response(200, content=JPEG)
            )

            path = await resolver.resolve_thumbnail(IMAGE_URL)

        assert head_route.called
        assert path == storage.default_path
        if get is None:
            assert not get_route.called

    @respx.mock
    async def test_network_error_falls_back_to_default(
        self, resolver: ThumbnailResolver, storage: LocalImageStorage
    ) -> None:
        """Should swallow connection errors and use the placeholder."""
        respx.head(IMAGE_URL).mock(side_effect=httpx.ConnectError("refused"))

        path = await resolver.resolve_thumbnail(IMAGE_URL)

        assert path == storage.default_path

    async def test_malformed_url_falls_back_to_default(
        self, resolver: ThumbnailResolver, storage: LocalImageStorage
    ) -> None:
        """Should treat an unparseable URL as a failed download."""
        path = await resolver.resolve_thumbnail("http://[::1")

        assert path == storage.default_path

    async def test_no_candidate_returns_default(
        self, resolver: ThumbnailResolver, storage: LocalImageStorage
    ) -> None:
        """Should return an existing placeholder without any input."""
        resolution = await resolver.resolve()

        assert resolution.source is ThumbnailSource.DEFAULT
        assert storage.exists(resolution.path)

    async def test_default_is_recreated_when_missing(
        self, resolver: ThumbnailResolver, storage: LocalImageStorage
    ) -> None:
        """Should regenerate the placeholder if it was removed."""
        storage.local_path(storage.default_path).unlink()

        path = await resolver.resolve_thumbnail()

        assert storage.exists(path)


class TestFrameCapture:
    """Tests for the frame capture step."""

    async def test_captures_and_keeps_median_frame(
        self, storage: LocalImageStorage
    ) -> None:
        """Should keep the middle frame and delete the others."""
        page = fake_page([b"frame-15", b"frame-30", b"frame-45"])
        resolver = ThumbnailResolver(storage, fake_browser(page))
        enable_capture(resolver, [15, 30, 45])

        resolution = await resolver.resolve(
            None, "dQw4w9WgXcQ", platform=Platform.YOUTUBE
        )

        assert resolution.source is ThumbnailSource.CAPTURED_FRAME
        assert storage.local_path(resolution.path).read_bytes() == b"frame-30"
        assert resolution.candidates == []
        stored = [p for p in storage.root.iterdir() if p.name != storage.default_filename]
        assert len(stored) == 1
        urls = [call.args[0] for call in page.goto.await_args_list]
        assert "start=30" in urls[1]
        assert "/embed/dQw4w9WgXcQ" in urls[0]

    async def test_keeps_candidates_when_requested(
        self, storage: LocalImageStorage
    ) -> None:
        """Should return every frame as a screenshot option."""
        page = fake_page([b"a", b"b", b"c"])
        resolver = ThumbnailResolver(storage, fake_browser(page))
        enable_capture(resolver, [15, 30, 45])

        resolution = await resolver.resolve(
            None, "dQw4w9WgXcQ", platform=Platform.YOUTUBE, keep_candidates=True
        )

        assert [c.timestamp_seconds for c in resolution.candidates] == [15, 30, 45]
        assert resolution.path == resolution.candidates[1].path
        assert all(storage.exists(c.path) for c in resolution.candidates)

    async def test_failed_offsets_are_skipped(self, storage: LocalImageStorage) -> None:
        """Should skip offsets whose screenshot failed."""
        page = fake_page([PlaywrightError("detached"), b"b", b"c"])
        resolver = ThumbnailResolver(storage, fake_browser(page))
        enable_capture(resolver, [15, 30, 45])

        frames = await resolver.capture_frames("dQw4w9WgXcQ")

        assert [f.timestamp_seconds for f in frames] == [30, 45]

    async def test_stops_when_budget_is_spent(self, storage: LocalImageStorage) -> None:
        """Should return the frames captured before the time budget ran out."""

        async def goto(url: str, **_: Any) -> None:
            if "start=30" in url:
                await asyncio.sleep(10)

        page = fake_page([b"a", b"b", b"c"])
        page.goto = AsyncMock(side_effect=goto)
        resolver = ThumbnailResolver(storage, fake_browser(page))
        enable_capture(resolver, [15, 30, 45])
        resolver._settings = resolver._settings.model_copy(
            update={"frame_capture_budget": 0.2}
        )

        frames = await resolver.capture_frames("dQw4w9WgXcQ")

        assert [f.timestamp_seconds for f in frames] == [15]
        assert page.goto.await_count == 2

    async def test_capture_failure_falls_back_to_default(
        self, storage: LocalImageStorage
    ) -> None:
        """Should use the placeholder when no frame was captured."""
        page = fake_page([PlaywrightError("crash"), PlaywrightError("crash")])
        resolver = ThumbnailResolver(storage, fake_browser(page))
        enable_capture(resolver, [15, 30])

        resolution = await resolver.resolve(
            None, "dQw4w9WgXcQ", platform=Platform.YOUTUBE
        )

        assert resolution.source is ThumbnailSource.DEFAULT

    async def test_capture_only_for_youtube(self, storage: LocalImageStorage) -> None:
        """Should not open the browser for other platforms."""
        browser = fake_browser(fake_page([]))
        resolver = ThumbnailResolver(storage, browser)
        enable_capture(resolver, [15])

        resolution = await resolver.resolve(
            None, "7234567890123456789", platform=Platform.TIKTOK
        )

        assert resolution.source is ThumbnailSource.DEFAULT
        browser.new_page.assert_not_called()

    async def test_capture_disabled_by_configuration(
        self, storage: LocalImageStorage
    ) -> None:
        """Should skip capture when the test configuration disables it."""
        browser = fake_browser(fake_page([]))
        resolver = ThumbnailResolver(storage, browser)

        resolution = await resolver.resolve(
            None, "dQw4w9WgXcQ", platform=Platform.YOUTUBE
        )

        assert resolution.source is ThumbnailSource.DEFAULT
        browser.new_page.assert_not_called()

    async def test_capture_without_browser_raises(
        self, storage: LocalImageStorage
    ) -> None:
        """Should refuse direct capture without a browser."""
        resolver = ThumbnailResolver(storage)

        with pytest.raises(FrameCaptureError):
            await resolver.capture_frames("dQw4w9WgXcQ")
