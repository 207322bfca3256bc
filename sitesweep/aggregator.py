# File: sitesweep/aggregator.py
"""sitesweep.aggregator: свёртка PageContent-записей в итоговый CrawlReport."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from sitesweep.crawler.models import (
    CrawlMetadata,
    CrawlReport,
    CrawlTarget,
    GlobalFindings,
    PageContent,
    PageSummary,
    SocialLink,
)

__all__ = ["aggregate_results"]


def _ordered_union(groups: Iterable[Iterable[str]]) -> List[str]:
    """Объединение множеств в порядке страниц; внутри страницы значения отсортированы."""
    merged: Dict[str, None] = {}
    for group in groups:
        for value in sorted(group):
            merged.setdefault(value, None)
    return list(merged)


def _summarize(page: PageContent) -> PageSummary:
    return PageSummary(
        url=page.url,
        title=page.title,
        headings=list(page.headings),
        content=page.content,
        images=[img.url for img in page.images],
    )


def aggregate_results(
    target: CrawlTarget,
    pages: Sequence[PageContent],
    socials: Sequence[SocialLink],
    duration: float,
) -> CrawlReport:
    """Собирает отчёт: seed первым, затем подстраницы в порядке планирования."""
    summaries = [_summarize(page) for page in pages]
    return CrawlReport(
        domain=target.hostname,
        global_findings=GlobalFindings(
            emails=_ordered_union(page.emails for page in pages),
            phones=_ordered_union(page.phones for page in pages),
            socials=list(socials),
        ),
        pages=summaries,
        metadata=CrawlMetadata(
            pages_visited=len(pages),
            total_images=sum(len(s.images) for s in summaries),
            crawl_duration=round(duration, 3),
        ),
    )
