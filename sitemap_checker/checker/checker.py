# === FILE: sitemap_checker/checker/checker.py ===
from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Optional, Sequence, Union

from sitemap_checker.aggregator import ResultSet, outcome_from_failure
from sitemap_checker.checker.models import CheckOutcome, URLRecord
from sitemap_checker.checker.observer import CheckObserver
from sitemap_checker.checker.probe import check_url, default_headers
from sitemap_checker.checker.retry import RetryPolicy
from sitemap_checker.checker.scheduler import BatchScheduler
from sitemap_checker.checker.transport import AiohttpTransport, Transport
from sitemap_checker.config import CheckerConfig
from sitemap_checker.logger import get_logger

__all__ = ("URLChecker",)


class URLChecker:
    """Асинхронная проверка доступности URL с ограничением параллельности и повторами."""

    def __init__(
        self,
        config: Optional[CheckerConfig] = None,
        *,
        transport: Optional[Transport] = None,
        observer: Optional[CheckObserver] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config or CheckerConfig()
        self.transport = transport
        self.observer = observer or CheckObserver()
        self.headers = default_headers(self.config.user_agent)
        self.retry_policy = RetryPolicy(
            max_retries=self.config.max_retries,
            backoff_ms=self.config.retry_backoff,
            sleep=sleep,
        )
        self.scheduler = BatchScheduler(
            self.config.concurrent,
            chunk_pause_ms=self.config.chunk_pause,
            progress_every=self.config.progress_every,
            strategy=self.config.strategy,
            sleep=sleep,
        )
        self.logger = get_logger("checker")
        # общий лимит на все одновременные check_urls одного экземпляра
        self._slots = asyncio.Semaphore(self.config.concurrent)
        self._owned_transport: Optional[AiohttpTransport] = None

    async def __aenter__(self) -> URLChecker:
        if self.transport is None:
            self._owned_transport = AiohttpTransport.create(
                limit=self.config.concurrent,
                timeout_seconds=self.config.timeout_seconds,
                headers=self.headers,
            )
            self.transport = self._owned_transport
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owned_transport is not None:
            await self._owned_transport.close()
            self._owned_transport = None
            self.transport = None

    async def check_urls(
        self,
        records: Sequence[URLRecord],
        *,
        stop: Optional[asyncio.Event] = None,
    ) -> ResultSet:
        """Проверяет все записи и возвращает заполненный ResultSet."""
        if self.transport is None:
            raise RuntimeError("Transport not initialized, use 'async with URLChecker(...)'")
        results = ResultSet(total=len(records))
        self.logger.info(
            "Старт проверки: %d URL, параллельно %d (%s)",
            len(records), self.config.concurrent, self.config.strategy,
        )
        self._notify("on_start", len(records), self.config.concurrent)
        started = time.monotonic()

        def settle(record: URLRecord, result: Union[CheckOutcome, BaseException]) -> None:
            if isinstance(result, CheckOutcome):
                outcome = result
            else:
                self.logger.warning("Check pipeline failed for %s: %r", record.url, result)
                outcome = outcome_from_failure(result)
            bucket = results.add(record, outcome)
            self._notify("on_outcome", record, outcome, bucket)

        await self.scheduler.run(
            records,
            self.check_record,
            settle,
            on_progress=lambda done, total: self._notify("on_progress", done, total),
            stop=stop,
        )
        results.finish()
        duration = time.monotonic() - started
        self.logger.info(
            "Завершено: %d URL за %.2f с (%.2f URL/с)",
            results.processed, duration, results.processed / duration if duration else 0,
        )
        self._notify("on_finish", results)
        return results

    async def check_record(self, record: URLRecord) -> CheckOutcome:
        """Одна запись: check_url под управлением RetryPolicy."""

        def on_retry(attempt: int, delay_ms: int, outcome: CheckOutcome) -> None:
            self._notify("on_retry", record, attempt, self.retry_policy.max_retries, delay_ms)

        async with self._slots:
            return await self.retry_policy.run(
                lambda: check_url(
                    self.transport,
                    record.url,
                    timeout_ms=self.config.timeout,
                    headers=self.headers,
                ),
                on_retry=on_retry,
                label=record.url,
            )

    def _notify(self, hook: str, *args) -> None:
        try:
            getattr(self.observer, hook)(*args)
        except Exception as exc:
            self.logger.warning("Observer %s failed: %s", hook, exc)
