# === FILE: sitesweep/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from functools import partial
from typing import Callable, List, Optional, Sequence, Set, Tuple, Union
from urllib.parse import urlsplit

from sitesweep.aggregator import aggregate_results
from sitesweep.browser.renderer import Renderer
from sitesweep.browser.session import PageSession
from sitesweep.config import CrawlSettings
from sitesweep.crawler.models import CrawlReport, CrawlTarget, PageContent, SocialLink
from sitesweep.errors import (
    InvalidInput,
    InvalidURL,
    NavigationError,
    PageSessionError,
    TargetUnreachable,
)
from sitesweep.parser.content import extract_content
from sitesweep.parser.links import discover_links
from sitesweep.parser.social import extract_socials
from sitesweep.utils import canonical_link, normalize_target

__all__ = ("CrawlState", "DeepCrawler", "build_queue", "batched")


class CrawlState(str, Enum):
    INIT = "init"
    SEED_LOADING = "seed_loading"
    SEED_EXTRACTED = "seed_extracted"
    BATCH_RUNNING = "batch_running"
    AGGREGATING = "aggregating"
    DONE = "done"
    FAILED = "failed"


def build_queue(links: Sequence[str], seed_urls: Sequence[str], max_pages: int) -> List[str]:
    """Discovered links minus every form of the seed URL, truncated to *max_pages*."""
    excluded = {canonical_link(url) for url in seed_urls}
    return [link for link in links if canonical_link(link) not in excluded][:max_pages]


def batched(items: Sequence[str], size: int) -> List[List[str]]:
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


class DeepCrawler:
    """Обход сайта в глубину на один уровень: seed-страница и до max_pages подстраниц.

    Subpages are visited in sequential batches of ``concurrent_tabs`` tabs.
    A batch is started only while the elapsed time is below
    ``crawl_deadline - deadline_margin``; failed subpages are logged and
    dropped. Only input errors and an unreachable seed escape :meth:`crawl`.
    """

    def __init__(
        self,
        renderer: Renderer,
        settings: Optional[CrawlSettings] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.renderer = renderer
        self.settings = settings or CrawlSettings()
        self.clock = clock
        self.state = CrawlState.INIT
        self.batch_index = -1
        self.failed_pages: List[str] = []
        self.logger = logging.getLogger("SiteSweep.crawler")

    async def crawl(self, seed: Union[str, CrawlTarget]) -> CrawlReport:
        self.state = CrawlState.INIT
        try:
            target = seed if isinstance(seed, CrawlTarget) else normalize_target(seed)
        except (InvalidInput, InvalidURL):
            self.state = CrawlState.FAILED
            raise

        self.logger.info("Старт обхода: %s", target.seed_url)
        start = self.clock()
        seed_page, links, socials, final_url = await self._load_seed(target)
        self.state = CrawlState.SEED_EXTRACTED

        queue = build_queue(links, (target.seed_url, final_url), self.settings.max_pages)
        self.logger.info(
            "Найдено ссылок: %d, к обходу: %d", len(links), len(queue)
        )

        pages: List[PageContent] = [seed_page]
        hosts = {target.hostname, urlsplit(seed_page.url).hostname}
        kept = {canonical_link(target.seed_url), canonical_link(seed_page.url)}
        batches = batched(queue, self.settings.concurrent_tabs)
        for index, batch in enumerate(batches):
            elapsed = self.clock() - start
            if elapsed >= self.settings.batch_budget:
                self.logger.warning(
                    "Deadline reached after %.2f s, %d batch(es) skipped",
                    elapsed,
                    len(batches) - index,
                )
                break
            self.state = CrawlState.BATCH_RUNNING
            self.batch_index = index
            results = await asyncio.gather(*(self._visit_subpage(url) for url in batch))
            pages.extend(page for page in results if page is not None and self._is_new_page(page, hosts, kept))

        self.state = CrawlState.AGGREGATING
        duration = self.clock() - start
        report = aggregate_results(target, pages, socials, duration)
        self.state = CrawlState.DONE
        self.logger.info(
            "Завершено: %d страниц за %.2f с (не загружено: %d)",
            report.metadata.pages_visited,
            duration,
            len(self.failed_pages),
        )
        return report

    def _is_new_page(self, page: PageContent, hosts: Set[str], kept: Set[str]) -> bool:
        """False for a subpage that redirected off the site or onto a page already kept.

        *hosts* holds the target hostname and the host the seed finally landed on.
        """
        if urlsplit(page.url).hostname not in hosts:
            self.logger.warning("Subpage skipped: redirected off-site to %s", page.url)
            return False
        key = canonical_link(page.url)
        if key in kept:
            self.logger.warning("Subpage skipped: %s was already visited", page.url)
            return False
        kept.add(key)
        return True

    async def _load_seed(
        self, target: CrawlTarget
    ) -> Tuple[PageContent, List[str], List[SocialLink], str]:
        self.state = CrawlState.SEED_LOADING
        settings = self.settings
        try:
            async with PageSession(self.renderer) as session:
                try:
                    await session.visit(target.seed_url, settings.seed_timeout, settings.settle_timeout)
                except NavigationError as exc:
                    raise TargetUnreachable(target.seed_url, exc.reason) from exc
                content = await session.extract(partial(extract_content, settings=settings))
                links = await session.extract(partial(discover_links, hostname=target.hostname))
                socials: List[SocialLink] = await session.extract(extract_socials)
                final_url = session.url
        except Exception:
            self.state = CrawlState.FAILED
            raise
        return content, links, socials, final_url

    async def _visit_subpage(self, url: str) -> Optional[PageContent]:
        settings = self.settings
        budget = settings.page_timeout + settings.settle_timeout + settings.extraction_timeout
        try:
            return await asyncio.wait_for(self._load_subpage(url), timeout=budget)
        except asyncio.TimeoutError:
            self.logger.warning("Subpage %s exceeded %.1f s, skipped", url, budget)
        except PageSessionError as exc:
            self.logger.warning("Subpage skipped: %s", exc)
        self.failed_pages.append(url)
        return None

    async def _load_subpage(self, url: str) -> PageContent:
        settings = self.settings
        async with PageSession(self.renderer) as session:
            await session.visit(url, settings.page_timeout, settings.settle_timeout)
            return await session.extract(partial(extract_content, settings=settings))
