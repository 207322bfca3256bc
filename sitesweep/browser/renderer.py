# File: sitesweep/browser/renderer.py
"""Boundary of the rendering capability.

The crawler never talks to Playwright directly: it asks a :class:`Renderer`
for a :class:`Tab`, drives it, and hands the tab back by closing it.  Tests
plug in an in-memory renderer with the same shape.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

__all__ = ["RequestObserver", "Tab", "Renderer", "RequestFindings"]

#: Called synchronously for every network request a tab issues.
RequestObserver = Callable[[str], None]

_GOOGLE_FONTS_RE = re.compile(r"fonts\.g(static|oogleapis)\.com", re.IGNORECASE)
_GOOGLE_MAPS_RE = re.compile(r"maps\.(googleapis|gstatic)\.com", re.IGNORECASE)


class Tab(Protocol):
    @property
    def url(self) -> str: ...

    async def goto(self, url: str, timeout: float) -> None:
        """Navigate and wait for DOMContentLoaded; raise NavigationError otherwise."""

    async def wait_for_quiet(self, timeout: float) -> None: ...

    async def content(self) -> str: ...

    async def screenshot(self, quality: int) -> bytes: ...

    async def close(self) -> None: ...


class Renderer(Protocol):
    async def new_tab(self, observer: Optional[RequestObserver] = None) -> Tab: ...


@dataclass(slots=True)
class RequestFindings:
    """Third-party loads seen by one page session (GDPR-relevant)."""

    google_fonts: bool = False
    google_maps: bool = False

    def observe(self, request_url: str) -> None:
        if _GOOGLE_FONTS_RE.search(request_url):
            self.google_fonts = True
        if _GOOGLE_MAPS_RE.search(request_url):
            self.google_maps = True
