# sitemap_checker/checker/retry.py
"""
Retry policy: bounded re-attempts with linear backoff for transient failures.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from sitemap_checker.checker.models import CheckOutcome
from sitemap_checker.checker.probe import is_transient
from sitemap_checker.logger import get_logger

log = get_logger("retry")

RetryHook = Callable[[int, int, CheckOutcome], None]


@dataclass(slots=True)
class RetryPolicy:
    """Runs an attempt factory until it yields a non-transient outcome or retries run out.

    The k-th retry waits ``k * backoff_ms`` milliseconds, so with the defaults
    the attempts start at 0 s, 1 s and 3 s.
    """

    max_retries: int = 2
    backoff_ms: int = 1000
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, repr=False)

    def delay_for(self, retry: int) -> int:
        return retry * self.backoff_ms

    async def run(
        self,
        attempt: Callable[[], Awaitable[CheckOutcome]],
        *,
        on_retry: Optional[RetryHook] = None,
        label: str = "",
    ) -> CheckOutcome:
        retry = 0
        while True:
            outcome = await attempt()
            if not is_transient(outcome):
                return outcome
            if retry >= self.max_retries:
                if self.max_retries:
                    log.warning(
                        "Giving up on %s after %d attempts: %s",
                        label, retry + 1, outcome.error or outcome.status_text,
                    )
                return outcome
            retry += 1
            delay = self.delay_for(retry)
            log.debug("Retry %d/%d for %s after %d ms", retry, self.max_retries, label, delay)
            if on_retry is not None:
                on_retry(retry, delay, outcome)
            await self.sleep(delay / 1000)
