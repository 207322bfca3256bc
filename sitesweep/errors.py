# File: sitesweep/errors.py
"""sitesweep.errors: иерархия исключений SiteSweep.

Only input-level and seed-level failures ever leave the crawler; per-page
:class:`PageSessionError` instances raised for subpages are absorbed there.
"""

from __future__ import annotations

__all__ = [
    "SiteSweepError",
    "InvalidInput",
    "InvalidURL",
    "TargetUnreachable",
    "CrawlTimeout",
    "PageSessionError",
    "NavigationError",
    "ExtractionError",
]


class SiteSweepError(Exception):
    """Base class for every error raised by the project."""


class InvalidInput(SiteSweepError):
    """The caller supplied no URL at all."""


class InvalidURL(SiteSweepError):
    """The supplied string is not an absolute http(s) URL."""


class TargetUnreachable(SiteSweepError):
    """The seed page never reached a loaded state."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Target unreachable: {url} ({reason})")
        self.url = url
        self.reason = reason


class CrawlTimeout(SiteSweepError):
    """The outer deadline around a crawl or scan expired."""

    def __init__(self, url: str, timeout: float) -> None:
        super().__init__(f"Operation on {url} did not finish within {timeout:g} seconds")
        self.url = url
        self.timeout = timeout


class PageSessionError(SiteSweepError):
    """A single browser tab failed; the tab itself is always released."""


class NavigationError(PageSessionError):
    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Navigation to {url} failed: {reason}")
        self.url = url
        self.reason = reason


class ExtractionError(PageSessionError):
    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Extraction on {url} failed: {reason}")
        self.url = url
        self.reason = reason
