# File: sitemap_checker/aggregator.py
"""sitemap_checker.aggregator: Классификация исходов проверки и накопление результатов."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Union

from sitemap_checker.checker.models import AugmentedResult, CheckOutcome, URLRecord

__all__ = ["Bucket", "ResultSet", "classify", "outcome_from_failure"]


class Bucket(str, Enum):
    """Четыре непересекающиеся категории результата."""

    WORKING = "working"
    WARNINGS = "warnings"
    ERRORS = "errors"
    TIMEOUTS = "timeouts"


def classify(outcome: CheckOutcome) -> Bucket:
    """Однозначно относит исход к одной категории."""
    if outcome.timed_out:
        return Bucket.TIMEOUTS
    status = outcome.http_status
    if status is not None and 200 <= status < 300:
        return Bucket.WORKING
    if status is not None and 300 <= status < 400:
        return Bucket.WARNINGS
    return Bucket.ERRORS


def outcome_from_failure(exc: BaseException) -> CheckOutcome:
    """Синтетический ERROR-исход для сбоя, у которого нет структурированного результата."""
    return CheckOutcome.failure(error=str(exc) or type(exc).__name__, status_text="Check failed")


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(slots=True)
class ResultSet:
    """Результаты одного запуска: четыре корзины и служебная статистика."""

    total: int = 0
    working: List[AugmentedResult] = field(default_factory=list)
    warnings: List[AugmentedResult] = field(default_factory=list)
    errors: List[AugmentedResult] = field(default_factory=list)
    timeouts: List[AugmentedResult] = field(default_factory=list)
    start_time_ms: int = field(default_factory=_now_ms)
    finish_time_ms: Optional[int] = None

    def bucket(self, name: Union[Bucket, str]) -> List[AugmentedResult]:
        return getattr(self, Bucket(name).value)

    def add(self, record: URLRecord, result: Union[CheckOutcome, BaseException]) -> Bucket:
        """Кладёт запись ровно в одну корзину. Исключение превращается в ошибку."""
        if self.completed:
            raise RuntimeError("ResultSet is already finished")
        outcome = result if isinstance(result, CheckOutcome) else outcome_from_failure(result)
        target = classify(outcome)
        self.bucket(target).append(AugmentedResult.merge(record, outcome))
        return target

    def finish(self) -> ResultSet:
        if self.finish_time_ms is None:
            self.finish_time_ms = _now_ms()
        return self

    @property
    def completed(self) -> bool:
        return self.finish_time_ms is not None

    @property
    def processed(self) -> int:
        return len(self.working) + len(self.warnings) + len(self.errors) + len(self.timeouts)

    @property
    def duration_ms(self) -> int:
        end = self.finish_time_ms if self.finish_time_ms is not None else _now_ms()
        return max(0, end - self.start_time_ms)

    @property
    def duration_seconds(self) -> float:
        return self.duration_ms / 1000

    def __iter__(self) -> Iterator[AugmentedResult]:
        for name in Bucket:
            yield from self.bucket(name)

    def counts(self) -> Dict[str, int]:
        return {name.value: len(self.bucket(name)) for name in Bucket}

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {name.value: [r.to_dict() for r in self.bucket(name)] for name in Bucket}
        data.update(
            total=self.total,
            start_time_ms=self.start_time_ms,
            finish_time_ms=self.finish_time_ms,
        )
        return data
