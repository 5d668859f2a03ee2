"""Shared headless Chromium handle.

Launching Chromium costs seconds and hundreds of megabytes, so one browser
process is started lazily on first use and shared by every request. Each
operation gets its own browser context (cookies, storage, user agent) and
page, so concurrent extractions never see each other's state. The owner
(the application lifespan) must call ``shutdown``.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from recipe_extraction.observability.logging import get_logger
from recipe_extraction.services.browser.exceptions import BrowserUnavailableError


if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from playwright.async_api import Browser, Page, Playwright

    from recipe_extraction.core.config.settings import BrowserSettings


logger = get_logger(__name__)


class BrowserManager:
    """Owns the Playwright driver and the shared Chromium process."""

    def __init__(self, settings: BrowserSettings) -> None:
        self._settings = settings
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()

    @property
    def is_started(self) -> bool:
        """Whether a connected browser process is currently running."""
        return self._browser is not None and self._browser.is_connected()

    @property
    def navigation_timeout_ms(self) -> float:
        return self._settings.navigation_timeout * 1000

    @property
    def selector_timeout_ms(self) -> float:
        return self._settings.selector_timeout * 1000

    async def _ensure_browser(self) -> Browser:
        if self.is_started:
            assert self._browser is not None
            return self._browser

        async with self._lock:
            # Another task may have launched while we waited
            if self.is_started:
                assert self._browser is not None
                return self._browser

            await self._close_handles()
            try:
                self._playwright = await async_playwright().start()
                self._browser = await self._playwright.chromium.launch(
                    headless=self._settings.headless,
                    args=self._settings.launch_args,
                )
            except (PlaywrightError, OSError) as e:
                await self._close_handles()
                msg = f"Failed to launch headless browser: {e}"
                raise BrowserUnavailableError(msg) from e

            logger.info(
                "Headless browser launched",
                headless=self._settings.headless,
                version=self._browser.version,
            )
            return self._browser

    @asynccontextmanager
    async def new_page(self, *, user_agent: str | None = None) -> AsyncIterator[Page]:
        """Open an isolated page, closing its context on exit.

        Args:
            user_agent: Override for the configured desktop user agent.

        Raises:
            BrowserUnavailableError: If the browser cannot be launched.
        """
        browser = await self._ensure_browser()
        context = await browser.new_context(
            user_agent=user_agent or self._settings.user_agent,
            viewport={
                "width": self._settings.viewport.width,
                "height": self._settings.viewport.height,
            },
            locale="en-US",
        )
        try:
            page = await context.new_page()
            page.set_default_navigation_timeout(self.navigation_timeout_ms)
            page.set_default_timeout(self.selector_timeout_ms)
            yield page
        finally:
            try:
                await context.close()
            except PlaywrightError as e:
                logger.debug("Browser context already closed", error=str(e))

    async def shutdown(self) -> None:
        """Close the browser process and stop the Playwright driver."""
        async with self._lock:
            was_started = self._browser is not None
            await self._close_handles()
        if was_started:
            logger.info("Headless browser shut down")

    async def _close_handles(self) -> None:
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as e:
                logger.warning("Error closing browser", error=str(e))
            self._browser = None
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except PlaywrightError as e:
                logger.warning("Error stopping Playwright", error=str(e))
            self._playwright = None
