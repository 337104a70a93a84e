# File: sitemap_checker/parser/line_parser.py
"""sitemap_checker.parser.line_parser: Разбор текстового списка URL в записи URLRecord.

Поддерживаемые форматы строки (проверяются в этом порядке, первый подошедший выигрывает):

* pipe     — ``URL | DATE | FREQUENCY [| PRIORITY]``;
* csv      — ``URL,DATE,FREQUENCY[,PRIORITY]``;
* standard — ``URL DATE FREQUENCY [PRIORITY]`` через пробелы.

Пустые строки и строки, начинающиеся с ``#``, пропускаются. Поля не
валидируются, это задача вызывающей стороны.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from sitemap_checker.checker.models import RecordSource, URLRecord
from sitemap_checker.logger import logger

__all__ = ["FORMATS", "PATTERNS", "ParseResult", "parse_line", "parse_lines"]

PATTERNS: Dict[str, re.Pattern[str]] = {
    # pipe и csv раньше standard: иначе "url | date" разберётся как три слова
    "pipe": re.compile(r"^([^|]+)\s*\|\s*([^|]+)\s*\|\s*([^|]+)(?:\s*\|\s*([^|]+))?"),
    "csv": re.compile(r"^([^,]+),\s*([^,]+),\s*([^,]+)(?:,\s*([^,]+))?"),
    "standard": re.compile(r"^(\S+)\s+(\S+)\s+(\S+)(?:\s+(\S+))?"),
}

#: допустимые значения fmt; "auto" перебирает PATTERNS по порядку
FORMATS = ("auto", *PATTERNS)


@dataclass(slots=True)
class ParseResult:
    """Записи и счётчики разбора."""

    records: List[URLRecord] = field(default_factory=list)
    total: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> int:
        return len(self.records)


def _priority(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        return float(raw.strip())
    except ValueError:
        return None


def _patterns_for(fmt: str) -> List[Tuple[str, re.Pattern[str]]]:
    if fmt == "auto":
        return list(PATTERNS.items())
    if fmt in PATTERNS:
        return [(fmt, PATTERNS[fmt])]
    raise ValueError(f"Unknown format {fmt!r}, expected one of {', '.join(FORMATS)}")


def parse_line(line: str, line_number: int, fmt: str = "auto") -> URLRecord:
    """Разбирает одну строку или бросает ValueError, если формат не распознан.

    fmt="auto" пробует все форматы, иначе применяется только указанный.
    """
    for name, pattern in _patterns_for(fmt):
        match = pattern.match(line)
        if match:
            url, lastmod, changefreq, priority = match.groups()
            return URLRecord(
                url=url.strip(),
                lastmod=lastmod.strip(),
                changefreq=changefreq.strip(),
                priority=_priority(priority),
                source=RecordSource(line=line_number, format=name),
            )
    raise ValueError(f"Unrecognized format: {line[:50]}")


def parse_lines(content: str, fmt: str = "auto") -> ParseResult:
    """Разбирает весь текст; нераспознанные строки логируются и считаются."""
    _patterns_for(fmt)  # неизвестный fmt: ошибка сразу, а не на каждой строке
    result = ParseResult()
    lines = [ln.strip() for ln in content.splitlines()]
    lines = [ln for ln in lines if ln and not ln.startswith("#")]
    result.total = len(lines)
    for index, line in enumerate(lines, start=1):
        try:
            result.records.append(parse_line(line, index, fmt))
        except ValueError as exc:
            logger.warning("Line %d: %s", index, exc)
            result.errors.append(f"line {index}: {exc}")
    logger.info("Parsed %d URLs, %d errors", result.success, len(result.errors))
    return result
