# File: tests/conftest.py
import asyncio
from collections import Counter
from typing import Any, Dict, List, Mapping, Optional

import pytest

from sitemap_checker.checker.models import HeadResponse, URLRecord
from sitemap_checker.config import CheckerConfig

#: marker for a URL whose request never completes
HANG = "hang"


class FakeTransport:
    """
    Deterministic in-memory transport.

    ``routes`` maps URL -> behaviour:
      * int                 – respond with that status from the same URL;
      * (int, final_url)    – respond with that status after a redirect;
      * HANG                – never respond;
      * BaseException       – raise it;
      * list of the above   – one item per call, the last one repeats.
    Unknown URLs answer 200. Tracks calls and the peak number of active requests.
    """

    def __init__(self, routes: Optional[Dict[str, Any]] = None, delay: float = 0.0) -> None:
        self.routes = dict(routes or {})
        self.delay = delay
        self.calls: Counter = Counter()
        self.headers_seen: List[Mapping[str, str]] = []
        self.active = 0
        self.max_active = 0

    def _behaviour(self, url: str) -> Any:
        route = self.routes.get(url, 200)
        if isinstance(route, list):
            index = min(self.calls[url] - 1, len(route) - 1)
            return route[index]
        return route

    async def head(self, url: str, headers: Mapping[str, str]) -> HeadResponse:
        self.calls[url] += 1
        self.headers_seen.append(dict(headers))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            behaviour = self._behaviour(url)
            if behaviour == HANG:
                await asyncio.sleep(3600)
            if isinstance(behaviour, BaseException):
                raise behaviour
            if isinstance(behaviour, tuple):
                status, final_url = behaviour
                return HeadResponse(status=status, reason="Redirected", url=final_url, redirected=True)
            return HeadResponse(status=behaviour, reason=_REASONS.get(behaviour, ""), url=url)
        finally:
            self.active -= 1


_REASONS = {200: "OK", 301: "Moved Permanently", 404: "Not Found", 500: "Internal Server Error"}


class RecordingSleep:
    """Drop-in for asyncio.sleep that records delays and only yields control."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


def make_records(n: int, prefix: str = "http://example.com/page") -> List[URLRecord]:
    return [URLRecord(url=f"{prefix}{i}") for i in range(n)]


@pytest.fixture()
def fast_config() -> CheckerConfig:
    """
    Config with short timeouts and no pauses, for fake-transport runs.
    """
    return CheckerConfig(
        concurrent=5,
        timeout=50,
        max_retries=2,
        retry_backoff=0,
        chunk_pause=0,
        user_agent="TestAgent/1.0",
    )


@pytest.fixture()
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
