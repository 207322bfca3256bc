# File: sitesweep/browser/__init__.py
"""sitesweep.browser: рендерер и сессия одной вкладки."""

from sitesweep.browser.renderer import Renderer, RequestFindings, RequestObserver, Tab
from sitesweep.browser.session import PageSession

__all__ = ["Renderer", "RequestFindings", "RequestObserver", "Tab", "PageSession"]
