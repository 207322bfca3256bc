# sitesweep/parser/links.py
"""
Link discovery and link canonicalization for SiteSweep.
"""
from __future__ import annotations

from typing import Dict, List, Tuple
from urllib.parse import unquote, urlsplit

from bs4.element import Tag

from sitesweep.parser.html_parser import DomSnapshot, attr
from sitesweep.utils import canonical_link, resolve_url

__all__ = ["NON_CONTENT_EXTENSIONS", "discover_links", "is_content_link"]

NON_CONTENT_EXTENSIONS: Tuple[str, ...] = (
    # documents
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".odt", ".ods", ".rtf", ".csv",
    # images
    ".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg", ".bmp", ".ico", ".tif", ".tiff", ".avif",
    # archives
    ".zip", ".rar", ".7z", ".tar", ".gz", ".tgz", ".bz2",
    # media
    ".mp3", ".mp4", ".avi", ".mov", ".webm",
)

_SKIPPED_SCHEMES = ("javascript:", "mailto:", "tel:")


def is_content_link(url: str) -> bool:
    """False for links whose path ends in a document/image/archive extension."""
    path = unquote(urlsplit(url).path).lower()
    return not path.endswith(NON_CONTENT_EXTENSIONS)


def discover_links(snapshot: DomSnapshot, hostname: str) -> List[str]:
    """
    Extract same-host content links from a loaded page.

    Links are resolved against the page's own URL, stripped of fragment and
    trailing slash and deduplicated; first-seen order is kept.
    """
    soup = snapshot.soup()
    host = hostname.lower()
    found: Dict[str, None] = {}
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        raw = attr(tag, "href")
        if not raw or raw.startswith("#") or raw.lower().startswith(_SKIPPED_SCHEMES):
            continue
        absolute = resolve_url(snapshot.url, raw)
        if absolute is None:
            continue
        parsed = urlsplit(absolute)
        if parsed.scheme not in ("http", "https") or parsed.hostname != host:
            continue
        link = canonical_link(absolute)
        if is_content_link(link):
            found.setdefault(link, None)
    return list(found)
