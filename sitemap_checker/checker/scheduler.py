# sitemap_checker/checker/scheduler.py
"""
Batch scheduler: drives per-record checks with at most ``concurrent`` in flight.

Two strategies share the same contract:

* ``batch`` – contiguous chunks of ``concurrent`` records; a chunk must settle
  completely before the next one starts, with a short pause in between. One
  slow URL holds back the whole next chunk.
* ``pool`` – ``concurrent`` long-lived workers pull records from a queue, so a
  slow URL only occupies its own worker.

Every record is handed to ``on_settled`` exactly once, either with its outcome
or with the exception its pipeline raised.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Sequence, TypeVar, Union

from sitemap_checker.logger import get_logger

__all__ = ("BatchScheduler", "CheckCancelled", "chunked")

T = TypeVar("T")
R = TypeVar("R")

log = get_logger("scheduler")


class CheckCancelled(Exception):
    """Handed to ``on_settled`` for records skipped after a stop request."""

    def __init__(self, message: str = "Check cancelled") -> None:
        super().__init__(message)


def chunked(items: Sequence[T], size: int) -> List[Sequence[T]]:
    """Split *items* into contiguous chunks of *size* (the last one may be shorter)."""
    if size < 1:
        raise ValueError("chunk size must be >= 1")
    return [items[i:i + size] for i in range(0, len(items), size)]


@dataclass(slots=True)
class _RunState:
    """Counters of one ``run()`` call; never shared between runs."""

    total: int
    on_settled: Callable[[Any, Any], None]
    on_progress: Optional[Callable[[int, int], None]] = None
    processed: int = 0


class BatchScheduler:
    """Bounded-concurrency driver for per-record coroutines.

    The scheduler keeps no per-run state, so one instance may drive several
    runs at once; each run is bounded by ``concurrent`` on its own.
    """

    STRATEGIES = ("batch", "pool")

    def __init__(
        self,
        concurrent: int = 10,
        *,
        chunk_pause_ms: int = 100,
        progress_every: int = 50,
        strategy: str = "batch",
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if concurrent < 1:
            raise ValueError("concurrent must be >= 1")
        if strategy not in self.STRATEGIES:
            raise ValueError(f"unknown strategy {strategy!r}")
        self.concurrent = concurrent
        self.chunk_pause_ms = chunk_pause_ms
        self.progress_every = max(1, progress_every)
        self.strategy = strategy
        self._sleep = sleep

    async def run(
        self,
        records: Sequence[T],
        check: Callable[[T], Awaitable[R]],
        on_settled: Callable[[T, Union[R, BaseException]], None],
        *,
        on_progress: Optional[Callable[[int, int], None]] = None,
        stop: Optional[asyncio.Event] = None,
    ) -> int:
        """Check every record and return how many were settled."""
        state = _RunState(total=len(records), on_settled=on_settled, on_progress=on_progress)
        if self.strategy == "pool":
            await self._run_pool(records, check, state, stop)
        else:
            await self._run_batches(records, check, state, stop)
        return state.processed

    def _settle(self, state: _RunState, record, result) -> None:
        state.on_settled(record, result)
        state.processed += 1
        if state.on_progress is not None and state.processed % self.progress_every == 0:
            state.on_progress(state.processed, state.total)

    async def _run_batches(self, records, check, state: _RunState, stop) -> None:
        chunks = chunked(records, self.concurrent)
        for index, chunk in enumerate(chunks):
            if stop is not None and stop.is_set():
                log.info("Stop requested, skipping %d remaining records", state.total - state.processed)
                for rest in chunks[index:]:
                    for record in rest:
                        self._settle(state, record, CheckCancelled())
                return
            if index and self.chunk_pause_ms:
                await self._sleep(self.chunk_pause_ms / 1000)
            results = await asyncio.gather(*(check(r) for r in chunk), return_exceptions=True)
            for record, result in zip(chunk, results):
                self._settle(state, record, result)

    async def _run_pool(self, records, check, state: _RunState, stop) -> None:
        queue: asyncio.Queue = asyncio.Queue()
        for record in records:
            queue.put_nowait(record)

        async def worker() -> None:
            while True:
                try:
                    record = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                if stop is not None and stop.is_set():
                    result = CheckCancelled()
                else:
                    try:
                        result = await check(record)
                    except Exception as exc:
                        result = exc
                self._settle(state, record, result)

        workers = [asyncio.create_task(worker()) for _ in range(min(self.concurrent, len(records)))]
        try:
            await asyncio.gather(*workers)
        finally:
            for w in workers:
                w.cancel()
