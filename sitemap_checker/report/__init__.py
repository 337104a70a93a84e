# File: sitemap_checker/report/__init__.py
"""sitemap_checker.report: Итоговая статистика и отчёты (текст, JSON, HTML) для CLI и тестов."""

from __future__ import annotations

from sitemap_checker.report.html_report import render_html
from sitemap_checker.report.json_report import render_json
from sitemap_checker.report.summary import CheckSummary, build_summary, render_text

__all__ = ["CheckSummary", "build_summary", "render_text", "render_json", "render_html"]
