# File: sitesweep/utils.py
"""sitesweep.utils: нормализация пользовательского URL и вспомогательные функции для ссылок."""

from __future__ import annotations

import re
from typing import Optional, Sequence
from urllib.parse import urldefrag, urljoin, urlsplit, urlunsplit

from sitesweep.crawler.models import CrawlTarget
from sitesweep.errors import InvalidInput, InvalidURL
from sitesweep.logger import logger

__all__: Sequence[str] = (
    "normalize_target",
    "canonical_link",
    "resolve_url",
    "is_http_url",
    "collapse_whitespace",
)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
# "user:pass@host" and "host:port" look like "scheme:..." too, so only
# explicit "name://" and schemes that never take "//" are foreign
_FOREIGN_SCHEME_RE = re.compile(
    r"^(?:[a-z][a-z0-9+.\-]*://|(?:mailto|tel|callto|sms|javascript|data|file|about|blob|news):)",
    re.IGNORECASE,
)
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_target(raw: Optional[str]) -> CrawlTarget:
    """Проверяет пользовательский ввод и возвращает CrawlTarget с абсолютным http(s) URL.

    ``example.com`` → ``https://example.com/``. Raises :class:`InvalidInput` for an
    empty string and :class:`InvalidURL` for anything that is not http(s).
    """
    trimmed = (raw or "").strip()
    if not trimmed:
        raise InvalidInput("URL is required")

    if not _SCHEME_RE.match(trimmed) and _FOREIGN_SCHEME_RE.match(trimmed):
        raise InvalidURL(f"Invalid URL. Provide a valid http(s) URL: {trimmed}")
    candidate = trimmed if _SCHEME_RE.match(trimmed) else f"https://{trimmed}"
    try:
        parts = urlsplit(candidate)
        parts.port  # raises ValueError on a malformed port
    except ValueError as exc:
        raise InvalidURL(f"Invalid URL: {trimmed}") from exc

    scheme = parts.scheme.lower()
    hostname = parts.hostname
    if scheme not in ("http", "https") or not hostname or any(ch.isspace() for ch in parts.netloc):
        raise InvalidURL(f"Invalid URL. Provide a valid http(s) URL: {trimmed}")

    netloc = parts.netloc.rsplit("@", 1)
    netloc[-1] = netloc[-1].lower()
    seed = urlunsplit((scheme, "@".join(netloc), parts.path or "/", parts.query, parts.fragment))
    logger.debug("Normalized target: %s -> %s", raw, seed)
    return CrawlTarget(seed_url=seed, hostname=hostname)


def canonical_link(url: str) -> str:
    """Убирает фрагмент и завершающий слеш: ``http://x.com/a/#f`` → ``http://x.com/a``."""
    return urldefrag(url)[0].rstrip("/")


def resolve_url(base: str, href: str) -> Optional[str]:
    """Resolve *href* against *base*; ``None`` when the result is not parseable."""
    try:
        resolved = urljoin(base, href.strip())
        urlsplit(resolved).port
    except ValueError:
        return None
    return resolved


def is_http_url(url: str) -> bool:
    """True only for absolute http(s) URLs with a host."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.hostname)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()
