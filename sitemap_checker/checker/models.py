# sitemap_checker/checker/models.py
"""
Data models for the URL checker: input records, per-attempt outcomes and the
merged result stored in report buckets.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class ProbeStatus(str, Enum):
    """Sentinel statuses for probes that produced no HTTP response."""

    TIMEOUT = "TIMEOUT"
    ERROR = "ERROR"


StatusT = Union[int, ProbeStatus]


@dataclass(frozen=True, slots=True)
class RecordSource:
    """Where a record came from: input line number and the matched format."""

    line: int
    format: str


@dataclass(frozen=True, slots=True)
class URLRecord:
    """One input URL plus optional sitemap metadata."""

    url: str
    lastmod: Optional[str] = None
    changefreq: Optional[str] = None
    priority: Optional[float] = None
    source: Optional[RecordSource] = None


@dataclass(frozen=True, slots=True)
class HeadResponse:
    """What a transport reports back for a HEAD request."""

    status: int
    reason: str
    url: str
    redirected: bool = False


@dataclass(slots=True)
class CheckOutcome:
    """Result of a single probe attempt."""

    status: StatusT
    status_text: str
    response_time_ms: int
    redirected: bool = False
    final_url: Optional[str] = None
    timed_out: bool = False
    error: Optional[str] = None

    @classmethod
    def timeout(cls, timeout_ms: int) -> CheckOutcome:
        return cls(
            status=ProbeStatus.TIMEOUT,
            status_text=f"Timeout after {timeout_ms}ms",
            response_time_ms=timeout_ms,
            timed_out=True,
            error="Request timeout",
        )

    @classmethod
    def failure(cls, error: str, status_text: str = "Check failed", response_time_ms: int = 0) -> CheckOutcome:
        return cls(
            status=ProbeStatus.ERROR,
            status_text=status_text,
            response_time_ms=response_time_ms,
            error=error,
        )

    @property
    def http_status(self) -> Optional[int]:
        return self.status if isinstance(self.status, int) else None


@dataclass(frozen=True, slots=True)
class AugmentedResult:
    """URLRecord fields merged with the final CheckOutcome of that record."""

    url: str
    status: StatusT
    status_text: str
    response_time_ms: int
    redirected: bool
    timed_out: bool
    final_url: Optional[str] = None
    error: Optional[str] = None
    lastmod: Optional[str] = None
    changefreq: Optional[str] = None
    priority: Optional[float] = None
    source: Optional[RecordSource] = None

    @classmethod
    def merge(cls, record: URLRecord, outcome: CheckOutcome) -> AugmentedResult:
        return cls(
            url=record.url,
            lastmod=record.lastmod,
            changefreq=record.changefreq,
            priority=record.priority,
            source=record.source,
            status=outcome.status,
            status_text=outcome.status_text,
            response_time_ms=outcome.response_time_ms,
            redirected=outcome.redirected,
            final_url=outcome.final_url,
            timed_out=outcome.timed_out,
            error=outcome.error,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if isinstance(self.status, ProbeStatus):
            data["status"] = self.status.value
        return data
