# === FILE: sitesweep/parser/content.py ===
"""Content extraction for one loaded page.

Produces a :class:`~sitesweep.crawler.models.PageContent`: title, h1–h3
headings, the main text block (hard-capped), images worth showing and
contact strings.  Image limits come from an :class:`ImagePolicy`, so the
deep crawl (10 images, 50 px floor) and the content harvest (5 images,
200 px floor) share one implementation.
"""
from __future__ import annotations

import re
from typing import Iterator, List, Optional, Set, Tuple
from urllib.parse import unquote, urlsplit

from bs4 import BeautifulSoup

from sitesweep.config import CrawlSettings, ImagePolicy
from sitesweep.crawler.models import ImageRef, PageContent
from sitesweep.parser.html_parser import DomSnapshot, attr, visible_text
from sitesweep.utils import collapse_whitespace, is_http_url, resolve_url

__all__ = [
    "CONTENT_SELECTORS",
    "extract_content",
    "extract_title",
    "extract_headings",
    "extract_main_text",
    "extract_images",
    "extract_contacts",
]

CONTENT_SELECTORS: Tuple[str, ...] = (
    "main",
    "article",
    '[role="main"]',
    "#content",
    ".content",
    "#main-content",
    ".main-content",
    "#main",
    ".post-content",
    ".entry-content",
    ".page-content",
)

LAZY_SRC_ATTRS: Tuple[str, ...] = ("data-src", "data-lazy-src", "data-original", "data-lazy", "src")
SRCSET_ATTRS: Tuple[str, ...] = ("srcset", "data-srcset")
BACKGROUND_TAGS: Tuple[str, ...] = ("div", "section", "header", "figure", "a", "span", "li")
VECTOR_EXTENSIONS: Tuple[str, ...] = (".svg", ".svgz")

EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE_RE = re.compile(r"\+?\(?\d[\d\s().\-/]{5,}\d")
_BACKGROUND_RE = re.compile(r"background(?:-image)?\s*:[^;]*?url\(\s*(['\"]?)(.+?)\1\s*\)", re.IGNORECASE)
_DIMENSION_RE = re.compile(r"^\s*(\d+)")
_NOT_AN_EMAIL = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg")


# --------------------------------------------------------------------------- #
# Text                                                                        #
# --------------------------------------------------------------------------- #


def extract_title(soup: BeautifulSoup) -> str:
    tag = soup.find("title")
    return collapse_whitespace(tag.get_text()) if tag else ""


def extract_headings(soup: BeautifulSoup) -> List[str]:
    headings = []
    for tag in soup.find_all(["h1", "h2", "h3"]):
        text = collapse_whitespace(tag.get_text(" "))
        if text:
            headings.append(text)
    return headings


def extract_main_text(soup: BeautifulSoup, max_length: int) -> str:
    """Text of the first non-empty content landmark, else the whole body."""
    for element in soup.find_all(["script", "style", "noscript", "template"]):
        element.decompose()
    text = ""
    for selector in CONTENT_SELECTORS:
        node = soup.select_one(selector)
        if node is not None:
            text = collapse_whitespace(node.get_text(" "))
            if text:
                break
    if not text:
        body = soup.body or soup
        text = collapse_whitespace(body.get_text(" "))
    return text[:max_length]


# --------------------------------------------------------------------------- #
# Images                                                                      #
# --------------------------------------------------------------------------- #


def _dimension(value: str) -> Optional[int]:
    match = _DIMENSION_RE.match(value)
    return int(match.group(1)) if match else None


def _best_from_srcset(srcset: str) -> str:
    """Pick the candidate with the largest ``w``/``x`` descriptor."""
    best, best_score = "", -1.0
    for candidate in srcset.split(","):
        parts = candidate.strip().split()
        if not parts:
            continue
        score = 0.0
        if len(parts) > 1:
            try:
                score = float(parts[1][:-1]) if parts[1][-1] in "wx" else 0.0
            except ValueError:
                score = 0.0
        if score > best_score:
            best, best_score = parts[0], score
    return best


def _usable_source(raw: str) -> bool:
    return bool(raw) and not raw.lower().startswith(("data:", "blob:", "about:"))


def _image_candidates(soup: BeautifulSoup) -> Iterator[Tuple[str, str, Optional[int], Optional[int]]]:
    """Yield ``(raw_url, alt, width, height)`` in document order."""
    for img in soup.find_all("img"):
        raw = next((attr(img, name) for name in LAZY_SRC_ATTRS if _usable_source(attr(img, name))), "")
        if not raw:
            raw = next(
                (_best_from_srcset(attr(img, name)) for name in SRCSET_ATTRS if attr(img, name)), ""
            )
        yield raw, attr(img, "alt"), _dimension(attr(img, "width")), _dimension(attr(img, "height"))

    for source in soup.select("picture source"):
        srcset = attr(source, "srcset") or attr(source, "data-srcset")
        if srcset:
            yield _best_from_srcset(srcset), "", None, None

    for tag in soup.find_all(list(BACKGROUND_TAGS), style=True):
        match = _BACKGROUND_RE.search(attr(tag, "style"))
        if match:
            yield match.group(2).strip(), "", None, None


def _is_vector(url: str) -> bool:
    path = unquote(urlsplit(url).path).lower()
    return path.endswith(VECTOR_EXTENSIONS)


def extract_images(soup: BeautifulSoup, page_url: str, policy: ImagePolicy) -> List[ImageRef]:
    """Изображения страницы: абсолютные http(s), без data:/svg, крупные сверху."""
    seen: Set[str] = set()
    images: List[ImageRef] = []
    for raw, alt, width, height in _image_candidates(soup):
        if not _usable_source(raw):
            continue
        resolved = resolve_url(page_url, raw)
        if resolved is None or _is_vector(resolved):
            continue
        if any(dim is not None and dim < policy.min_dimension for dim in (width, height)):
            continue
        if resolved in seen:
            continue
        seen.add(resolved)
        images.append(ImageRef(url=resolved, alt=alt, width=width, height=height))

    images.sort(key=lambda img: img.area, reverse=True)
    # resolution alone is not trusted to produce absolute URLs
    images = [img for img in images if is_http_url(img.url)]
    return images[: policy.max_images]


# --------------------------------------------------------------------------- #
# Contacts                                                                    #
# --------------------------------------------------------------------------- #


def _anchor_target(href: str, scheme: str) -> str:
    value = href[len(scheme):].split("?", 1)[0]
    return unquote(value).strip()


def extract_contacts(soup: BeautifulSoup, min_phone_digits: int) -> Tuple[Set[str], Set[str]]:
    """Return ``(emails, phones)`` from visible text and mailto:/tel: anchors."""
    emails: Set[str] = set()
    phones: Set[str] = set()

    for anchor in soup.find_all("a", href=True):
        href = attr(anchor, "href")
        lowered = href.lower()
        if lowered.startswith("mailto:"):
            email = _anchor_target(href, "mailto:")
            if email:
                emails.add(email.lower())
        elif lowered.startswith("tel:"):
            phone = _anchor_target(href, "tel:")
            if phone:
                phones.add(phone)

    text = visible_text(soup)
    for match in EMAIL_RE.findall(text):
        if not match.lower().endswith(_NOT_AN_EMAIL):
            emails.add(match.lower())
    for match in PHONE_RE.findall(text):
        candidate = collapse_whitespace(match)
        if sum(ch.isdigit() for ch in candidate) >= min_phone_digits:
            phones.add(candidate)
    return emails, phones


# --------------------------------------------------------------------------- #
# Entry point                                                                 #
# --------------------------------------------------------------------------- #


def extract_content(
    snapshot: DomSnapshot,
    settings: Optional[CrawlSettings] = None,
    policy: Optional[ImagePolicy] = None,
) -> PageContent:
    """Build the PageContent record for *snapshot*.

    *policy* defaults to ``settings.images``; pass ``settings.harvest_images``
    for the content-harvest variant.
    """
    settings = settings or CrawlSettings()
    policy = policy or settings.images

    soup = snapshot.soup()
    title = extract_title(soup)
    headings = extract_headings(soup)
    images = extract_images(soup, snapshot.url, policy)
    emails, phones = extract_contacts(soup, settings.min_phone_digits)
    # images first: the text helpers drop noscript fallbacks in place
    content = extract_main_text(soup, settings.max_content_length)

    return PageContent(
        url=snapshot.url,
        title=title,
        headings=tuple(headings),
        content=content,
        images=tuple(images),
        emails=frozenset(emails),
        phones=frozenset(phones),
    )
