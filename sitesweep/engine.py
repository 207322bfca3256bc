# File: sitesweep/engine.py
"""sitesweep.engine: фасад над браузером, краулером и аудитом для CLI, HTTP-сервера и тестов."""

from __future__ import annotations

import asyncio
from functools import partial
from typing import AsyncContextManager, Awaitable, Callable, Optional, TypeVar

from sitesweep.browser.playwright_renderer import PlaywrightRenderer
from sitesweep.browser.renderer import Renderer
from sitesweep.browser.session import PageSession
from sitesweep.config import BrowserSettings, SiteSweepConfig, load_config
from sitesweep.crawler.crawler import DeepCrawler
from sitesweep.crawler.models import CrawlReport, CrawlTarget, PageContent
from sitesweep.errors import CrawlTimeout, NavigationError, TargetUnreachable
from sitesweep.logger import logger
from sitesweep.parser.content import extract_content
from sitesweep.scanner import ScanResult, scan_page
from sitesweep.utils import normalize_target

__all__ = ["Engine", "RendererFactory"]

T = TypeVar("T")

#: Builds a renderer scoped to one operation; the browser closes when the block exits.
RendererFactory = Callable[[BrowserSettings], AsyncContextManager[Renderer]]


class Engine:
    """Один вызов — один браузер: запуск, операция, гарантированное закрытие."""

    @staticmethod
    def load_config(path: Optional[str]) -> SiteSweepConfig:
        """Загружает конфиг из YAML/JSON или использует значения по умолчанию."""
        return load_config(path)

    def __init__(
        self,
        config: Optional[SiteSweepConfig] = None,
        renderer_factory: RendererFactory = PlaywrightRenderer,
    ) -> None:
        self.config = config or SiteSweepConfig()
        self.renderer_factory = renderer_factory

    async def crawl(self, raw_url: Optional[str]) -> CrawlReport:
        """Deep crawl under the outer deadline; raises CrawlTimeout when it expires."""
        target = normalize_target(raw_url)
        settings = self.config.crawl

        async def _run(renderer: Renderer) -> CrawlReport:
            return await DeepCrawler(renderer, settings).crawl(target)

        return await self._with_deadline(target, settings.crawl_deadline, _run)

    async def scan(self, raw_url: Optional[str]) -> ScanResult:
        target = normalize_target(raw_url)
        return await self._with_deadline(target, self.config.scan.deadline, partial(self._scan, target))

    async def harvest(self, raw_url: Optional[str]) -> PageContent:
        """Контент одной страницы с политикой изображений harvest (5 шт., от 200 px)."""
        target = normalize_target(raw_url)
        deadline = self.config.crawl.crawl_deadline
        return await self._with_deadline(target, deadline, partial(self._harvest, target))

    # ------------------------------------------------------------------ #
    # Sync wrappers for the CLI                                          #
    # ------------------------------------------------------------------ #

    def start_crawl(self, raw_url: Optional[str]) -> CrawlReport:
        return asyncio.run(self.crawl(raw_url))

    def start_scan(self, raw_url: Optional[str]) -> ScanResult:
        return asyncio.run(self.scan(raw_url))

    def start_harvest(self, raw_url: Optional[str]) -> PageContent:
        return asyncio.run(self.harvest(raw_url))

    # ------------------------------------------------------------------ #
    # Internals                                                          #
    # ------------------------------------------------------------------ #

    async def _scan(self, target: CrawlTarget, renderer: Renderer) -> ScanResult:
        return await scan_page(renderer, target, self.config.scan)

    async def _harvest(self, target: CrawlTarget, renderer: Renderer) -> PageContent:
        settings = self.config.crawl
        async with PageSession(renderer) as session:
            try:
                await session.visit(target.seed_url, settings.seed_timeout, settings.settle_timeout)
            except NavigationError as exc:
                raise TargetUnreachable(target.seed_url, exc.reason) from exc
            return await session.extract(
                partial(extract_content, settings=settings, policy=settings.harvest_images)
            )

    async def _with_deadline(
        self,
        target: CrawlTarget,
        timeout: float,
        operation: Callable[[Renderer], Awaitable[T]],
    ) -> T:
        async def _runner() -> T:
            async with self.renderer_factory(self.config.browser) as renderer:
                return await operation(renderer)

        try:
            return await asyncio.wait_for(_runner(), timeout=timeout)
        except asyncio.TimeoutError as exc:
            logger.error("%s did not finish within %s seconds", target.seed_url, timeout)
            raise CrawlTimeout(target.seed_url, timeout) from exc
        except Exception as exc:
            logger.error("Operation on %s failed: %s", target.seed_url, exc)
            raise

