# sitemap_checker/checker/observer.py
"""
Observer hooks for a checking run.

The checker core never prints; progress and per-record outcomes are pushed to
a :class:`CheckObserver`. :class:`ConsoleObserver` reproduces the classic
glyph stream (``✓ ⚠ ✗ ⏱``) on the terminal through click.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitemap_checker.checker.models import CheckOutcome, URLRecord

if TYPE_CHECKING:  # pragma: no cover
    from sitemap_checker.aggregator import Bucket, ResultSet


class CheckObserver:
    """No-op base class; override what you need."""

    def on_start(self, total: int, concurrent: int) -> None:
        pass

    def on_outcome(self, record: URLRecord, outcome: CheckOutcome, bucket: Bucket) -> None:
        pass

    def on_retry(self, record: URLRecord, attempt: int, max_retries: int, delay_ms: int) -> None:
        pass

    def on_progress(self, processed: int, total: int) -> None:
        pass

    def on_finish(self, results: ResultSet) -> None:
        pass


class ConsoleObserver(CheckObserver):
    _GLYPHS = {
        "working": ("✓", "green"),
        "warnings": ("⚠", "yellow"),
        "errors": ("✗", "red"),
        "timeouts": ("⏱", "bright_black"),
    }

    def __init__(self, *, err: bool = False) -> None:
        self.err = err

    def on_start(self, total: int, concurrent: int) -> None:
        click.secho("\nURL CHECK", fg="cyan", bold=True, err=self.err)
        click.secho("=" * 50, fg="cyan", err=self.err)
        click.echo(f"Checking {total} URLs with {concurrent} concurrent connections...\n", err=self.err)

    def on_outcome(self, record: URLRecord, outcome: CheckOutcome, bucket: Bucket) -> None:
        glyph, color = self._GLYPHS[bucket.value]
        click.secho(glyph, fg=color, nl=False, err=self.err)

    def on_retry(self, record: URLRecord, attempt: int, max_retries: int, delay_ms: int) -> None:
        click.secho(
            f"\nRetry {attempt}/{max_retries} for {record.url} in {delay_ms} ms",
            fg="yellow",
            err=self.err,
        )

    def on_progress(self, processed: int, total: int) -> None:
        click.secho(f" {processed}/{total}", fg="bright_black", err=self.err)

    def on_finish(self, results: ResultSet) -> None:
        click.secho(
            f"\n\nCheck finished in {results.duration_seconds:.2f}s",
            fg="bright_black",
            err=self.err,
        )
