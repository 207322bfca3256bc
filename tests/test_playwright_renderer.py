# File: tests/test_playwright_renderer.py
"""PlaywrightTab and PlaywrightRenderer, checked against stand-in Playwright objects."""
import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeout

from sitesweep.browser import playwright_renderer
from sitesweep.browser.playwright_renderer import PlaywrightRenderer, PlaywrightTab
from sitesweep.config import BrowserSettings
from sitesweep.errors import NavigationError


class StubPage:
    def __init__(self, error=None, closed=False):
        self.error = error
        self.closed = closed
        self.close_calls = 0
        self.goto_args = None
        self.url = "about:blank"

    async def goto(self, url, wait_until, timeout):
        self.goto_args = (url, wait_until, timeout)
        if self.error is not None:
            raise self.error
        self.url = url

    def is_closed(self):
        return self.closed

    async def close(self):
        self.close_calls += 1
        self.closed = True


@pytest.mark.asyncio()
async def test_goto_waits_for_dom_content_loaded():
    page = StubPage()
    tab = PlaywrightTab(page)
    await tab.goto("https://example.com/", timeout=8.0)
    assert page.goto_args == ("https://example.com/", "domcontentloaded", 8000.0)
    assert tab.url == "https://example.com/"


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "error,reason",
    [
        (PlaywrightTimeout("Timeout 8000ms exceeded."), "timeout after 8s"),
        (PlaywrightError("net::ERR_NAME_NOT_RESOLVED at https://example.com/"), "net::ERR_NAME_NOT_RESOLVED"),
    ],
)
async def test_goto_errors_become_navigation_errors(error, reason):
    tab = PlaywrightTab(StubPage(error=error))
    with pytest.raises(NavigationError) as exc_info:
        await tab.goto("https://example.com/", timeout=8.0)
    assert reason in exc_info.value.reason


@pytest.mark.asyncio()
async def test_close_skips_closed_pages():
    page = StubPage(closed=True)
    await PlaywrightTab(page).close()
    assert page.close_calls == 0

    page = StubPage()
    await PlaywrightTab(page).close()
    assert page.close_calls == 1


@pytest.mark.asyncio()
async def test_new_tab_requires_started_browser():
    renderer = PlaywrightRenderer(BrowserSettings())
    with pytest.raises(RuntimeError):
        await renderer.new_tab()


class StubRoute:
    def __init__(self, url):
        self.request = type("StubRequest", (), {"url": url})()
        self.continued = 0

    async def continue_(self):
        self.continued += 1


class StubContext:
    def __init__(self):
        self.page = StubPage()
        self.handlers = []
        self.close_calls = 0

        async def route(pattern, handler):
            self.handlers.append((pattern, handler))

        self.page.route = route

    async def new_page(self):
        return self.page

    async def close(self):
        self.close_calls += 1


class StubBrowser:
    def __init__(self, context_error=None):
        self.context_error = context_error
        self.context = StubContext()
        self.close_calls = 0

    async def new_context(self, viewport, user_agent):
        if self.context_error is not None:
            raise self.context_error
        return self.context

    async def close(self):
        self.close_calls += 1


class StubPlaywright:
    def __init__(self, browser):
        self.browser = browser
        self.stop_calls = 0
        self.launch_args = None

        async def launch(headless, args):
            self.launch_args = (headless, args)
            return self.browser

        self.chromium = type("StubChromium", (), {})()
        self.chromium.launch = launch

    async def stop(self):
        self.stop_calls += 1


@pytest.fixture
def stub_playwright(monkeypatch):
    """Подменяет async_playwright(); возвращает фабрику для заглушки."""

    def install(browser):
        pw = StubPlaywright(browser)

        class Starter:
            async def start(self):
                return pw

        monkeypatch.setattr(playwright_renderer, "async_playwright", Starter)
        return pw

    return install


@pytest.mark.asyncio()
async def test_failing_observer_does_not_block_requests(monkeypatch):
    warnings = []
    monkeypatch.setattr(playwright_renderer.logger, "warning", lambda msg, *args: warnings.append(msg % args))

    def observer(url):
        raise ValueError(f"cannot record {url}")

    renderer = PlaywrightRenderer(BrowserSettings())
    renderer._context = StubContext()
    await renderer.new_tab(observer=observer)

    [(pattern, handler)] = renderer._context.handlers
    route = StubRoute("https://example.com/app.js")
    await handler(route)

    assert pattern == "**/*"
    assert route.continued == 1
    assert warnings == ["Request observer error: cannot record https://example.com/app.js"]


@pytest.mark.asyncio()
async def test_failed_context_start_releases_browser(stub_playwright):
    browser = StubBrowser(context_error=PlaywrightError("Target page, context or browser has been closed"))
    pw = stub_playwright(browser)

    with pytest.raises(PlaywrightError):
        async with PlaywrightRenderer(BrowserSettings()):
            pass

    assert browser.close_calls == 1
    assert pw.stop_calls == 1


@pytest.mark.asyncio()
async def test_renderer_closes_everything_once(stub_playwright):
    browser = StubBrowser()
    pw = stub_playwright(browser)
    renderer = PlaywrightRenderer(BrowserSettings(headless=True))

    async with renderer:
        tab = await renderer.new_tab()
    await renderer.__aexit__(None, None, None)

    assert pw.launch_args[0] is True
    assert isinstance(tab, PlaywrightTab)
    assert browser.context.close_calls == 1
    assert browser.close_calls == 1
    assert pw.stop_calls == 1
