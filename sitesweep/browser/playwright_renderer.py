# File: sitesweep/browser/playwright_renderer.py
"""Playwright-backed renderer: one Chromium process and one context per crawl."""
from __future__ import annotations

from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, Route, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeout

from sitesweep.browser.renderer import RequestObserver
from sitesweep.config import BrowserSettings
from sitesweep.errors import NavigationError
from sitesweep.logger import get_logger

__all__ = ["PlaywrightRenderer", "PlaywrightTab"]

logger = get_logger("browser")


def _ms(seconds: float) -> float:
    return seconds * 1000.0


class PlaywrightTab:
    """A Playwright page behind the :class:`~sitesweep.browser.renderer.Tab` protocol."""

    def __init__(self, page: Page) -> None:
        self._page = page

    @property
    def url(self) -> str:
        return self._page.url

    async def goto(self, url: str, timeout: float) -> None:
        try:
            await self._page.goto(url, wait_until="domcontentloaded", timeout=_ms(timeout))
        except PlaywrightTimeout as exc:
            raise NavigationError(url, f"timeout after {timeout:g}s") from exc
        except PlaywrightError as exc:
            raise NavigationError(url, exc.message) from exc

    async def wait_for_quiet(self, timeout: float) -> None:
        await self._page.wait_for_load_state("networkidle", timeout=_ms(timeout))

    async def content(self) -> str:
        return await self._page.content()

    async def screenshot(self, quality: int) -> bytes:
        return await self._page.screenshot(full_page=False, type="jpeg", quality=quality)

    async def close(self) -> None:
        if self._page.is_closed():
            return
        await self._page.close()


class PlaywrightRenderer:
    """Асинхронный контекстный менеджер вокруг Chromium.

    The browser is launched in ``__aenter__`` and closed exactly once in
    ``__aexit__``, whatever happened in between.
    """

    def __init__(self, settings: BrowserSettings) -> None:
        self.settings = settings
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def __aenter__(self) -> PlaywrightRenderer:
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.settings.headless, args=list(self.settings.args)
            )
            self._context = await self._browser.new_context(
                viewport={
                    "width": self.settings.viewport_width,
                    "height": self.settings.viewport_height,
                },
                user_agent=self.settings.user_agent,
            )
        except BaseException:
            await self._shutdown()
            raise
        logger.debug("Chromium started (headless=%s)", self.settings.headless)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._shutdown()

    async def new_tab(self, observer: Optional[RequestObserver] = None) -> PlaywrightTab:
        if self._context is None:
            raise RuntimeError("Renderer not started")
        page = await self._context.new_page()
        if observer is not None:

            async def _route(route: Route) -> None:
                try:
                    observer(route.request.url)
                except Exception as exc:
                    logger.warning("Request observer error: %s", exc)
                try:
                    await route.continue_()
                except PlaywrightError as exc:
                    logger.debug("Route continue failed: %s", exc)

            await page.route("**/*", _route)
        return PlaywrightTab(page)

    async def _shutdown(self) -> None:
        context, self._context = self._context, None
        browser, self._browser = self._browser, None
        pw, self._playwright = self._playwright, None
        if context is not None:
            try:
                await context.close()
            except PlaywrightError as exc:
                logger.debug("Context close error: %s", exc)
        if browser is not None:
            try:
                await browser.close()
            except PlaywrightError as exc:
                logger.error("Browser close error: %s", exc)
        if pw is not None:
            await pw.stop()
