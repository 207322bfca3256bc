# File: sitesweep/crawler/__init__.py
"""sitesweep.crawler: модели данных и оркестратор глубокого обхода.

The orchestrator lives in :mod:`sitesweep.crawler.crawler`; only the models
are re-exported here because :mod:`sitesweep.utils` depends on them.
"""

from sitesweep.crawler.models import (
    CrawlReport,
    CrawlTarget,
    ImageRef,
    PageContent,
    SocialLink,
    SocialPlatform,
)

__all__ = ["CrawlReport", "CrawlTarget", "ImageRef", "PageContent", "SocialLink", "SocialPlatform"]
