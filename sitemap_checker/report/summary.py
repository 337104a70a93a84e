# File: sitemap_checker/report/summary.py
"""sitemap_checker.report.summary: Итоговая статистика, вердикт и текстовый отчёт."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List

import click

from sitemap_checker.aggregator import Bucket, ResultSet
from sitemap_checker.checker.models import AugmentedResult

__all__ = ["CheckSummary", "build_summary", "render_text", "DISPLAY_LIMITS"]

#: сколько записей каждой категории показывать в текстовом отчёте
DISPLAY_LIMITS: Dict[str, int] = {"errors": 10, "timeouts": 5, "warnings": 5}


def _percent(part: int, total: int) -> float:
    return (part / total) * 100 if total else 0.0


@dataclass(slots=True)
class CheckSummary:
    """Агрегированные показатели завершённого запуска."""

    total: int
    counts: Dict[str, int]
    percents: Dict[str, float]
    duration_seconds: float
    throughput: float
    avg_response_ms: float
    slow_count: int
    slow_threshold_ms: int
    success: bool

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_summary(
    results: ResultSet,
    *,
    slow_threshold_ms: int = 3000,
    max_timeout_ratio: float = 0.10,
) -> CheckSummary:
    """Считает проценты, скорость, среднее время ответа и вердикт.

    Вердикт успешен, только если ошибок нет и таймаутов строго меньше
    ``max_timeout_ratio`` от общего числа.
    """
    total = results.total
    counts = results.counts()
    duration = results.duration_seconds
    working = results.working
    avg = sum(r.response_time_ms for r in working) / len(working) if working else 0.0
    slow = sum(1 for r in working if r.response_time_ms > slow_threshold_ms)
    # пустой запуск не считается успешным (0 таймаутов не меньше 0)
    success = bool(total) and counts["errors"] == 0 and counts["timeouts"] / total < max_timeout_ratio
    return CheckSummary(
        total=total,
        counts=counts,
        percents={name: _percent(n, total) for name, n in counts.items()},
        duration_seconds=duration,
        throughput=total / duration if duration else 0.0,
        avg_response_ms=avg,
        slow_count=slow,
        slow_threshold_ms=slow_threshold_ms,
        success=success,
    )


def _more(lines: List[str], items: List[AugmentedResult], limit: int, noun: str, color: bool) -> None:
    if len(items) > limit:
        lines.append(_style(f"    ... and {len(items) - limit} more {noun}", color, fg="bright_black"))


def _style(text: str, color: bool, **kwargs: Any) -> str:
    return click.style(text, **kwargs) if color else text


def render_text(
    results: ResultSet,
    summary: CheckSummary,
    *,
    limits: Dict[str, int] | None = None,
    color: bool = False,
) -> str:
    """Человекочитаемый отчёт: счётчики, длительность и выборка проблемных URL."""
    limits = {**DISPLAY_LIMITS, **(limits or {})}
    p = summary.percents
    c = summary.counts
    lines: List[str] = [
        _style("\nCHECK REPORT", color, fg="cyan", bold=True),
        _style("=" * 50, color, fg="cyan"),
        f"Total URLs: {summary.total}",
        f"Working:   {c['working']} ({p['working']:.1f}%)",
        f"Redirects: {c['warnings']} ({p['warnings']:.1f}%)",
        f"Timeouts:  {c['timeouts']} ({p['timeouts']:.1f}%)",
        f"Errors:    {c['errors']} ({p['errors']:.1f}%)",
        f"Duration:  {summary.duration_seconds:.2f}s ({summary.throughput:.1f} URLs/s)",
    ]

    errors = results.bucket(Bucket.ERRORS)
    if errors:
        lines.append(_style("\nERRORS:", color, fg="red", bold=True))
        for r in errors[: limits["errors"]]:
            lines.append(_style(f"  • {r.url}", color, fg="red"))
            lines.append(f"    Status: {_status(r)} - {r.status_text}")
            if r.error:
                lines.append(f"    Error: {r.error}")
        _more(lines, errors, limits["errors"], "errors", color)

    timeouts = results.bucket(Bucket.TIMEOUTS)
    if timeouts:
        lines.append(_style("\nTIMEOUTS:", color, fg="bright_black", bold=True))
        for r in timeouts[: limits["timeouts"]]:
            lines.append(f"  • {r.url}")
            lines.append(f"    Time: {r.response_time_ms}ms")
        _more(lines, timeouts, limits["timeouts"], "timeouts", color)

    redirects = results.bucket(Bucket.WARNINGS)
    if redirects:
        lines.append(_style("\nREDIRECTS:", color, fg="yellow", bold=True))
        for r in redirects[: limits["warnings"]]:
            lines.append(_style(f"  • {r.url}", color, fg="yellow"))
            lines.append(f"    → {r.final_url or 'Unknown'} ({_status(r)})")
        _more(lines, redirects, limits["warnings"], "redirects", color)

    if results.working:
        lines.append(_style("\nPERFORMANCE:", color, fg="green", bold=True))
        lines.append(f"Average response time: {summary.avg_response_ms:.0f}ms")
        if summary.slow_count:
            lines.append(f"Slow URLs (>{summary.slow_threshold_ms / 1000:g}s): {summary.slow_count}")

    verdict = "PASSED" if summary.success else "FAILED"
    lines.append(_style(f"\nResult: {verdict}", color, fg="green" if summary.success else "red", bold=True))
    return "\n".join(lines)


def _status(r: AugmentedResult) -> str:
    return str(getattr(r.status, "value", r.status))
