# sitesweep/parser/audit.py
"""Сигналы одностраничного аудита: SEO, мобильная вёрстка, Impressum, тех-стек."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from sitesweep.parser.html_parser import DomSnapshot, attr
from sitesweep.utils import collapse_whitespace

__all__ = ["PageSignals", "TECH_FINGERPRINTS", "extract_signals", "detect_tech_stack"]

TECH_FINGERPRINTS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("WordPress", ("wp-content",)),
    ("Wix", ("wixstatic.com", "wixsite.com")),
    ("Jimdo", ("jimstatic.com", "jimdo")),
    ("Squarespace", ("squarespace",)),
    ("Shopify", ("shopify",)),
    ("Google Analytics", ("google-analytics", "gtag(", "gtm.js")),
)


@dataclass(slots=True)
class PageSignals:
    title: str = ""
    meta_description: str = ""
    has_viewport_meta: bool = False
    has_impressum_link: bool = False
    h1_count: int = 0
    tech_stack: List[str] = field(default_factory=list)


def detect_tech_stack(html: str) -> List[str]:
    lower = html.lower()
    return [name for name, needles in TECH_FINGERPRINTS if any(n in lower for n in needles)]


def extract_signals(snapshot: DomSnapshot) -> PageSignals:
    soup = snapshot.soup()
    title_tag = soup.find("title")
    description = soup.find("meta", attrs={"name": "description"})
    return PageSignals(
        title=collapse_whitespace(title_tag.get_text()) if title_tag else "",
        meta_description=attr(description, "content") if description else "",
        has_viewport_meta=soup.find("meta", attrs={"name": "viewport"}) is not None,
        has_impressum_link=any(
            "impressum" in a.get_text().lower() for a in soup.find_all("a")
        ),
        h1_count=len(soup.find_all("h1")),
        tech_stack=detect_tech_stack(snapshot.html),
    )
