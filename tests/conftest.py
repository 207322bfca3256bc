# File: tests/conftest.py
"""Shared fixtures: an in-memory renderer standing in for Chromium."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import pytest

from sitesweep.browser.renderer import RequestObserver
from sitesweep.config import CrawlSettings, SiteSweepConfig
from sitesweep.errors import NavigationError


@dataclass
class FakePage:
    """How a URL behaves when a fake tab navigates to it."""

    html: str = "<html><head><title>Page</title></head><body><p>Hello</p></body></html>"
    final_url: Optional[str] = None
    delay: float = 0.0
    fail: Optional[str] = None
    requests: Sequence[str] = ()
    content_error: Optional[str] = None
    content_delay: float = 0.0
    settles: bool = True


class FakeTab:
    def __init__(self, renderer: "FakeRenderer", observer: Optional[RequestObserver]) -> None:
        self.renderer = renderer
        self.observer = observer
        self.page: Optional[FakePage] = None
        self._url = "about:blank"
        self.closed = False

    @property
    def url(self) -> str:
        return self._url

    async def goto(self, url: str, timeout: float) -> None:
        self.renderer.visited.append(url)
        page = self.renderer.lookup(url)
        if page is None:
            raise NavigationError(url, "net::ERR_NAME_NOT_RESOLVED")
        if page.fail:
            raise NavigationError(url, page.fail)
        if page.delay > timeout:
            await asyncio.sleep(timeout)
            raise NavigationError(url, f"timeout after {timeout:g}s")
        await asyncio.sleep(page.delay)
        for request_url in page.requests:
            if self.observer is not None:
                self.observer(request_url)
        self.page = page
        self._url = page.final_url or url

    async def wait_for_quiet(self, timeout: float) -> None:
        if self.page is not None and not self.page.settles:
            await asyncio.sleep(min(timeout, 0.01))
            raise asyncio.TimeoutError("networkidle not reached")

    async def content(self) -> str:
        assert self.page is not None
        if self.page.content_delay:
            await asyncio.sleep(self.page.content_delay)
        if self.page.content_error:
            raise RuntimeError(self.page.content_error)
        return self.page.html

    async def screenshot(self, quality: int) -> bytes:
        if self.renderer.screenshot_error:
            raise RuntimeError("screenshot failed")
        return b"jpeg-bytes"

    async def close(self) -> None:
        if self.closed:
            raise RuntimeError("Target page has been closed")
        self.closed = True
        self.renderer.active -= 1
        self.renderer.closed += 1
        self.renderer.events.append(("close", self._url))


@dataclass
class FakeRenderer:
    """Renderer over a dict of URL -> FakePage; records what happened."""

    site: Dict[str, FakePage] = field(default_factory=dict)
    screenshot_error: bool = False
    visited: List[str] = field(default_factory=list)
    events: List[tuple] = field(default_factory=list)
    opened: int = 0
    closed: int = 0
    active: int = 0
    max_active: int = 0
    launches: int = 0
    shutdowns: int = 0

    def lookup(self, url: str) -> Optional[FakePage]:
        for key in (url, url.rstrip("/"), url.rstrip("/") + "/"):
            if key in self.site:
                return self.site[key]
        return None

    async def new_tab(self, observer: Optional[RequestObserver] = None) -> FakeTab:
        self.opened += 1
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        self.events.append(("open", None))
        return FakeTab(self, observer)

    # used as the Engine's renderer factory result
    async def __aenter__(self) -> "FakeRenderer":
        self.launches += 1
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.shutdowns += 1

    def factory(self, _settings) -> "FakeRenderer":
        return self


def page_html(title: str = "Page", body: str = "", head: str = "") -> str:
    return f"<html><head><title>{title}</title>{head}</head><body>{body}</body></html>"


def links_html(*hrefs: str) -> str:
    return "".join(f'<a href="{href}">link</a>' for href in hrefs)


@pytest.fixture()
def fast_settings() -> CrawlSettings:
    """Crawl settings with short timeouts so failing pages do not slow the suite."""
    return CrawlSettings(
        seed_timeout=1.0,
        page_timeout=0.2,
        settle_timeout=0.05,
        extraction_timeout=0.2,
        crawl_deadline=30.0,
        deadline_margin=5.0,
    )


@pytest.fixture()
def fast_config(fast_settings) -> SiteSweepConfig:
    return SiteSweepConfig(crawl=fast_settings)


@pytest.fixture()
def demo_site() -> Dict[str, FakePage]:
    """Seed with four subpages, contacts, images and social links."""
    seed_body = (
        '<header><a href="/">Home</a></header>'
        "<main><h1>Willkommen</h1><p>Kontakt: info@example.com</p>"
        '<img src="/img/hero.jpg" width="1200" height="600" alt="Hero"></main>'
        + links_html("/about", "/services/", "/contact#form", "/blog", "https://other.org/x")
        + '<a href="https://www.facebook.com/example">fb</a>'
        + '<a href="https://www.facebook.com/sharer/sharer.php?u=x">share</a>'
    )
    return {
        "https://example.com/": FakePage(html=page_html("Example Home", seed_body)),
        "https://example.com/about": FakePage(
            html=page_html("About", '<main><h2>Team</h2><p>Tel: +49 30 1234 5678</p>'
                           '<img src="team.jpg" width="400" height="300"></main>')
        ),
        "https://example.com/services": FakePage(html=page_html("Services", "<article>We build</article>")),
        "https://example.com/contact": FakePage(
            html=page_html("Contact", '<a href="mailto:Sales@Example.com">mail</a>')
        ),
        "https://example.com/blog": FakePage(html=page_html("Blog", "<main>Posts</main>")),
    }
