# === FILE: sitesweep/scanner.py ===
"""
Одностраничный аудит: HTTPS, viewport, Impressum, DSGVO (Google Fonts/Maps), SEO.

Score starts at 100 and every finding subtracts a fixed penalty (floored at
zero).  Issue messages are German because the audience of the report is.
"""
from __future__ import annotations

import base64
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlsplit

from sitesweep.browser.renderer import Renderer, RequestFindings
from sitesweep.browser.session import PageSession
from sitesweep.config import ScanSettings
from sitesweep.crawler.models import CrawlTarget
from sitesweep.errors import NavigationError, TargetUnreachable
from sitesweep.logger import get_logger
from sitesweep.parser.audit import PageSignals, extract_signals

__all__ = ["Issue", "ScanResult", "score_page", "scan_page"]

logger = get_logger("scanner")


@dataclass(frozen=True, slots=True)
class Issue:
    category: str
    severity: str
    message: str


@dataclass(slots=True)
class ScanResult:
    url: str
    final_url: str
    score: int
    screenshot: Optional[str] = None
    issues: List[Issue] = field(default_factory=list)
    tech_stack: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "finalUrl": self.final_url,
            "score": self.score,
            "screenshot": self.screenshot,
            "issues": [asdict(issue) for issue in self.issues],
            "techStack": list(self.tech_stack),
        }


def score_page(
    signals: PageSignals, final_url: str, findings: RequestFindings
) -> Tuple[int, List[Issue]]:
    """Apply the penalty table; returns ``(score, issues)``."""
    issues: List[Issue] = []
    score = 100

    def penalize(amount: int, category: str, severity: str, message: str) -> None:
        nonlocal score
        issues.append(Issue(category, severity, message))
        score = max(0, score - amount)

    if urlsplit(final_url).scheme != "https":
        penalize(40, "security", "high", "Webseite ist nicht verschlüsselt (kein HTTPS).")
    if not signals.has_viewport_meta:
        penalize(20, "mobile", "high", "Kein responsiver Viewport-Meta-Tag gefunden.")
    if not signals.has_impressum_link:
        penalize(30, "legal", "critical", "Kein Impressum-Link gefunden.")
    if findings.google_fonts:
        penalize(20, "gdpr", "high", "Google Fonts werden extern geladen (mögliche DSGVO-Verletzung).")
    if findings.google_maps:
        penalize(0, "gdpr", "medium", "Google Maps wird extern eingebunden.")
    if len(signals.title) < 10:
        length_info = f" ({len(signals.title)} Zeichen)" if signals.title else ""
        penalize(5, "seo", "medium", f"Seitentitel fehlt oder ist zu kurz{length_info}.")
    if not signals.meta_description:
        penalize(5, "seo", "medium", "Meta-Description fehlt.")
    if signals.h1_count != 1:
        penalize(5, "seo", "medium", f"H1-Struktur fehlerhaft (gefunden: {signals.h1_count}).")
    return score, issues


async def scan_page(
    renderer: Renderer, target: CrawlTarget, settings: Optional[ScanSettings] = None
) -> ScanResult:
    """Render *target* once and audit it."""
    settings = settings or ScanSettings()
    logger.info("Starting scan for %s", target.seed_url)
    async with PageSession(renderer) as session:
        try:
            await session.visit(target.seed_url, settings.navigation_timeout, settings.settle_timeout)
        except NavigationError as exc:
            raise TargetUnreachable(target.seed_url, exc.reason) from exc

        final_url = session.url
        signals = await session.extract(extract_signals)
        screenshot: Optional[str] = None
        try:
            shot = await session.screenshot(settings.screenshot_quality)
            screenshot = base64.b64encode(shot).decode("ascii")
        except Exception as exc:
            logger.warning("Screenshot failed: %s", exc)

        score, issues = score_page(signals, final_url, session.findings)

    return ScanResult(
        url=target.seed_url,
        final_url=final_url,
        score=score,
        screenshot=screenshot,
        issues=issues,
        tech_stack=list(dict.fromkeys(signals.tech_stack)),
    )
