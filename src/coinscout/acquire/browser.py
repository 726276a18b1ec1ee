"""Heavy fetch method: render the page in a headless Chromium via Playwright."""

import asyncio
import logging

from playwright.async_api import Browser, BrowserContext, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from coinscout.acquire.base import FetchResult, random_user_agent

logger = logging.getLogger(__name__)


class BrowserFetchMethod:
    """Render pages in one isolated browser context shared across URLs.

    The browser is launched on first use and kept until :meth:`close`, which
    the owner must call when the run ends. If the launch fails, whatever was
    started is torn down at once and every later fetch fails without another
    launch attempt.

    Args:
        timeout: Navigation timeout in seconds.
        headless: Run Chromium without a window.
    """

    name = "browser"

    def __init__(self, *, timeout: float = 10.0, headless: bool = True) -> None:
        self._timeout_ms = timeout * 1000
        self._headless = headless
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._launch_error: str | None = None
        self._lock = asyncio.Lock()

    async def _ensure_context(self) -> BrowserContext:
        async with self._lock:
            if self._context is None:
                self._playwright, self._browser, self._context = await self._launch()
                logger.info("Launched headless browser")
            return self._context

    async def _launch(self) -> tuple[Playwright, Browser, BrowserContext]:
        playwright = await async_playwright().start()
        browser: Browser | None = None
        try:
            browser = await playwright.chromium.launch(headless=self._headless)
            context = await browser.new_context(user_agent=random_user_agent())
        except BaseException:
            if browser is not None:
                await browser.close()
            await playwright.stop()
            raise
        return playwright, browser, context

    async def fetch(self, url: str) -> FetchResult:
        if self._launch_error is not None:
            return FetchResult.failure(self.name, self._launch_error)

        try:
            context = await self._ensure_context()
        except PlaywrightError as e:
            self._launch_error = f"{type(e).__name__}: {e}"
            logger.warning(f"Browser launch failed, rendered fetches disabled. Error: {e}")
            return FetchResult.failure(self.name, self._launch_error)

        try:
            page = await context.new_page()
            try:
                await page.goto(url, timeout=self._timeout_ms, wait_until="domcontentloaded")
                markup = await page.content()
            finally:
                await page.close()
        except PlaywrightError as e:
            return FetchResult.failure(self.name, f"{type(e).__name__}: {e}")
        return FetchResult.success(self.name, markup)

    async def close(self) -> None:
        """Tear down the context, browser and Playwright driver."""
        async with self._lock:
            if self._context is not None:
                await self._context.close()
                self._context = None
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
