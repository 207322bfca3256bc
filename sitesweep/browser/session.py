# File: sitesweep/browser/session.py
"""One browser tab, scoped.

Usage::

    async with PageSession(renderer) as session:
        await session.visit(url, timeout=8.0, settle_timeout=3.0)
        content = await session.extract(extract_content)

The tab is released on every exit path, including navigation and extraction
failures and task cancellation.
"""
from __future__ import annotations

import asyncio
from typing import Callable, Optional, TypeVar

from sitesweep.browser.renderer import Renderer, RequestFindings, Tab
from sitesweep.errors import ExtractionError, PageSessionError
from sitesweep.logger import get_logger
from sitesweep.parser.html_parser import DomSnapshot

__all__ = ["PageSession"]

T = TypeVar("T")

logger = get_logger("session")


class PageSession:
    """Owns exactly one tab between :meth:`open` and :meth:`close`."""

    def __init__(self, renderer: Renderer) -> None:
        self._renderer = renderer
        self._tab: Optional[Tab] = None
        self._snapshot: Optional[DomSnapshot] = None
        self.findings = RequestFindings()

    async def __aenter__(self) -> PageSession:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def url(self) -> str:
        if self._tab is None:
            raise PageSessionError("Page session is not open")
        return self._tab.url

    async def open(self) -> None:
        if self._tab is not None:
            return
        try:
            self._tab = await self._renderer.new_tab(observer=self.findings.observe)
        except PageSessionError:
            raise
        except Exception as exc:
            raise PageSessionError(f"Could not open a browser tab: {exc}") from exc

    async def visit(self, url: str, timeout: float, settle_timeout: float = 0.0) -> None:
        """Navigate to *url*.

        Only a failed hard navigation raises :class:`NavigationError`; the
        network-idle wait afterwards is best effort.
        """
        tab = self._require_tab()
        self._snapshot = None
        await tab.goto(url, timeout)
        if settle_timeout > 0:
            try:
                await tab.wait_for_quiet(settle_timeout)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.debug("Network did not settle on %s: %s", url, exc)

    async def snapshot(self) -> DomSnapshot:
        tab = self._require_tab()
        if self._snapshot is None:
            try:
                html = await tab.content()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                raise ExtractionError(tab.url, f"DOM unavailable: {exc}") from exc
            self._snapshot = DomSnapshot(url=tab.url, html=html)
        return self._snapshot

    async def extract(self, fn: Callable[[DomSnapshot], T]) -> T:
        """Run *fn* against the loaded DOM; any error it raises becomes ExtractionError."""
        snapshot = await self.snapshot()
        try:
            return fn(snapshot)
        except Exception as exc:
            raise ExtractionError(snapshot.url, f"{type(exc).__name__}: {exc}") from exc

    async def screenshot(self, quality: int = 60) -> bytes:
        return await self._require_tab().screenshot(quality)

    async def close(self) -> None:
        """Release the tab. Safe to call twice and never raises."""
        tab, self._tab = self._tab, None
        self._snapshot = None
        if tab is None:
            return
        try:
            await tab.close()
        except Exception as exc:
            logger.debug("Tab already gone on close: %s", exc)

    def _require_tab(self) -> Tab:
        if self._tab is None:
            raise PageSessionError("Page session is not open")
        return self._tab


