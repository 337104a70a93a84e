# File: sitemap_checker/engine.py
"""sitemap_checker.engine: Оркестрация — загрузка входных записей, запуск проверки и подсчёт вердикта."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from sitemap_checker.aggregator import ResultSet
from sitemap_checker.checker.checker import URLChecker
from sitemap_checker.checker.models import URLRecord
from sitemap_checker.checker.observer import CheckObserver
from sitemap_checker.checker.transport import Transport
from sitemap_checker.config import CheckerConfig
from sitemap_checker.logger import logger
from sitemap_checker.parser.line_parser import parse_lines
from sitemap_checker.parser.sitemap_parser import sitemap_records
from sitemap_checker.report.summary import CheckSummary, build_summary

__all__ = ["CheckRun", "InputError", "load_records", "start_check"]


class InputError(ValueError):
    """Входные данные не удалось получить: файл не читается или в нём нет URL."""


@dataclass(slots=True)
class CheckRun:
    """Результат полного запуска: корзины и итоговая статистика."""

    results: ResultSet
    summary: CheckSummary

    @property
    def success(self) -> bool:
        return self.summary.success

    @property
    def exit_code(self) -> int:
        return self.summary.exit_code


def _read_text(path: Union[str, Path]) -> str:
    p = Path(path).expanduser()
    if not p.is_file():
        raise InputError(f"Input file not found: {p}")
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InputError(f"Cannot read {p}: {exc}") from exc


def load_records(
    input_path: Union[str, Path, None] = None,
    sitemap_path: Union[str, Path, None] = None,
    fmt: str = "auto",
) -> List[URLRecord]:
    """Читает URL из текстового списка или из sitemap.xml.

    Ровно один из путей должен быть задан, fmt действует только на текстовый
    список. Ошибка чтения или пустой результат — InputError, этот сбой
    фатален для запуска.
    """
    if (input_path is None) == (sitemap_path is None):
        raise InputError("Specify exactly one of input file or sitemap")

    if sitemap_path is not None:
        records = sitemap_records(_read_text(sitemap_path))
        source = sitemap_path
    else:
        records = parse_lines(_read_text(input_path), fmt).records
        source = input_path

    if not records:
        raise InputError(f"No valid URLs found in {source}")
    logger.info("Loaded %d URLs from %s", len(records), source)
    return records


async def start_check(
    config: CheckerConfig,
    records: Sequence[URLRecord],
    *,
    observer: Optional[CheckObserver] = None,
    transport: Optional[Transport] = None,
    stop: Optional[asyncio.Event] = None,
) -> CheckRun:
    """Запускает URLChecker в контексте и возвращает CheckRun."""
    async with URLChecker(config, transport=transport, observer=observer) as checker:
        results = await checker.check_urls(records, stop=stop)
    summary = build_summary(
        results,
        slow_threshold_ms=config.slow_threshold,
        max_timeout_ratio=config.max_timeout_ratio,
    )
    return CheckRun(results=results, summary=summary)

