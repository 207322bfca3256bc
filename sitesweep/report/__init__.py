# File: sitesweep/report/__init__.py
"""sitesweep.report: генерация отчётов (JSON и HTML) для CLI."""

from sitesweep.report.html_report import render_html
from sitesweep.report.json_report import render_json

__all__ = ["render_json", "render_html"]
