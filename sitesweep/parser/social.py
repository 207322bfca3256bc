# sitesweep/parser/social.py
"""Social profile links found on a page."""
from __future__ import annotations

from typing import FrozenSet, List, Optional, Set, Tuple
from urllib.parse import urlsplit

from sitesweep.crawler.models import SocialLink, SocialPlatform
from sitesweep.parser.html_parser import DomSnapshot, attr
from sitesweep.utils import resolve_url

__all__ = [
    "PLATFORM_DOMAINS",
    "SHARE_PATHS",
    "SHARE_SEGMENTS",
    "classify_social",
    "extract_socials",
    "is_share_link",
]

PLATFORM_DOMAINS: Tuple[Tuple[SocialPlatform, Tuple[str, ...]], ...] = (
    (SocialPlatform.FACEBOOK, ("facebook.com", "fb.com")),
    (SocialPlatform.INSTAGRAM, ("instagram.com",)),
    (SocialPlatform.LINKEDIN, ("linkedin.com",)),
    (SocialPlatform.TWITTER, ("twitter.com", "x.com")),
    (SocialPlatform.YOUTUBE, ("youtube.com", "youtu.be")),
    (SocialPlatform.TIKTOK, ("tiktok.com",)),
    (SocialPlatform.PINTEREST, ("pinterest.com", "pinterest.de")),
    (SocialPlatform.XING, ("xing.com",)),
)

# "share this page" widgets are not the site's own profiles;
# matched per path segment so handles like /sharedspaces stay profiles
SHARE_SEGMENTS: FrozenSet[str] = frozenset(
    {"share", "sharer", "sharer.php", "sharearticle", "share-offsite", "dialog"}
)
SHARE_PATHS: Tuple[str, ...] = ("intent/tweet", "intent/post", "pin/create", "spi/shares")


def is_share_link(url: str) -> bool:
    parts = urlsplit(url)
    segments = [segment for segment in parts.path.lower().split("/") if segment]
    if any(segment in SHARE_SEGMENTS for segment in segments):
        return True
    path = "/" + "/".join(segments) + "/"
    if any(f"/{prefix}/" in path for prefix in SHARE_PATHS):
        return True
    return "shareurl=" in parts.query.lower()


def classify_social(url: str) -> Optional[SocialPlatform]:
    """Platform the URL belongs to, ``None`` for anything else (including share links)."""
    host = (urlsplit(url).hostname or "").lower()
    if not host or is_share_link(url):
        return None
    for platform, domains in PLATFORM_DOMAINS:
        if any(host == domain or host.endswith("." + domain) for domain in domains):
            return platform
    return None


def extract_socials(snapshot: DomSnapshot) -> List[SocialLink]:
    seen: Set[str] = set()
    socials: List[SocialLink] = []
    for anchor in snapshot.soup().find_all("a", href=True):
        resolved = resolve_url(snapshot.url, attr(anchor, "href"))
        if resolved is None or not resolved.startswith(("http://", "https://")):
            continue
        platform = classify_social(resolved)
        if platform is None or resolved in seen:
            continue
        seen.add(resolved)
        socials.append(SocialLink(platform=platform, url=resolved))
    return socials
