# sitesweep/crawler/models.py
"""
Data models for the SiteSweep crawler.
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple


@dataclass(frozen=True, slots=True)
class CrawlTarget:
    """Normalized seed URL; its hostname is the same-domain boundary of the crawl."""

    seed_url: str
    hostname: str


@dataclass(frozen=True, slots=True)
class ImageRef:
    url: str
    alt: str = ""
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def area(self) -> int:
        if self.width is None or self.height is None:
            return 0
        return self.width * self.height


@dataclass(frozen=True, slots=True)
class PageContent:
    """Structured content of one successfully loaded page."""

    url: str
    title: str
    headings: Tuple[str, ...] = ()
    content: str = ""
    images: Tuple[ImageRef, ...] = ()
    emails: FrozenSet[str] = frozenset()
    phones: FrozenSet[str] = frozenset()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "headings": list(self.headings),
            "content": self.content,
            "images": [asdict(img) for img in self.images],
            "emails": sorted(self.emails),
            "phones": sorted(self.phones),
        }


class SocialPlatform(str, Enum):
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    LINKEDIN = "linkedin"
    TWITTER = "twitter"
    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    PINTEREST = "pinterest"
    XING = "xing"


@dataclass(frozen=True, slots=True)
class SocialLink:
    platform: SocialPlatform
    url: str


@dataclass(slots=True)
class PageSummary:
    """Одна страница в итоговом отчёте: изображения сведены к списку URL."""

    url: str
    title: str
    headings: List[str]
    content: str
    images: List[str]


@dataclass(slots=True)
class GlobalFindings:
    emails: List[str] = field(default_factory=list)
    phones: List[str] = field(default_factory=list)
    socials: List[SocialLink] = field(default_factory=list)


@dataclass(slots=True)
class CrawlMetadata:
    pages_visited: int
    total_images: int
    crawl_duration: float


@dataclass(slots=True)
class CrawlReport:
    """Terminal artifact of a deep crawl."""

    domain: str
    global_findings: GlobalFindings
    pages: List[PageSummary]
    metadata: CrawlMetadata

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain": self.domain,
            "global": {
                "emails": list(self.global_findings.emails),
                "phones": list(self.global_findings.phones),
                "socials": [
                    {"platform": s.platform.value, "url": s.url}
                    for s in self.global_findings.socials
                ],
            },
            "pages": [asdict(page) for page in self.pages],
            "metadata": {
                "pagesVisited": self.metadata.pages_visited,
                "totalImages": self.metadata.total_images,
                "crawlDuration": self.metadata.crawl_duration,
            },
        }

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление отчёта."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)
