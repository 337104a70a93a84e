# sitemap_checker/checker/probe.py
"""
Check operation: one HEAD probe for one URL with a hard timeout.

``check_url`` never raises. Timeouts and transport failures come back as
:class:`CheckOutcome` values with the ``TIMEOUT`` / ``ERROR`` sentinels; retrying
is left to :mod:`sitemap_checker.checker.retry`.
"""
from __future__ import annotations

import asyncio
import errno
import socket
import time
from typing import Dict, Mapping, Optional

from aiohttp import ClientConnectorError, ClientError, ServerDisconnectedError

from sitemap_checker.checker.models import CheckOutcome, ProbeStatus
from sitemap_checker.checker.transport import Transport
from sitemap_checker.logger import get_logger

__all__ = ("check_url", "default_headers", "error_code", "TRANSIENT_ERRORS", "is_transient")

log = get_logger("probe")

#: transport failures worth another attempt (connection dropped mid-flight)
TRANSIENT_ERRORS = frozenset({"ECONNRESET", "ECONNABORTED", "EPIPE", "ServerDisconnectedError"})


def default_headers(user_agent: str) -> Dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "*/*",
        "Cache-Control": "no-cache",
    }


def error_code(exc: BaseException) -> str:
    """Short cause code: errno name, ENOTFOUND for resolver errors, else the class name."""
    if isinstance(exc, ClientConnectorError) and isinstance(exc.os_error, socket.gaierror):
        return "ENOTFOUND"
    if isinstance(exc, ServerDisconnectedError):
        return "ServerDisconnectedError"
    code: Optional[int] = getattr(exc, "errno", None)
    if isinstance(code, int) and code in errno.errorcode:
        return errno.errorcode[code]
    return type(exc).__name__


def is_transient(outcome: CheckOutcome) -> bool:
    """Timeouts and connection-reset class errors are retried, nothing else."""
    if outcome.timed_out:
        return True
    return outcome.status == ProbeStatus.ERROR and outcome.error in TRANSIENT_ERRORS


def _elapsed_ms(started: float) -> int:
    return int(round((time.monotonic() - started) * 1000))


async def check_url(
    transport: Transport,
    url: str,
    *,
    timeout_ms: int = 5000,
    headers: Optional[Mapping[str, str]] = None,
) -> CheckOutcome:
    """Probe *url* once and return a CheckOutcome within *timeout_ms*."""
    started = time.monotonic()
    try:
        response = await asyncio.wait_for(
            transport.head(url, headers or {}), timeout=timeout_ms / 1000
        )
    except asyncio.TimeoutError:
        # also covers aiohttp.ServerTimeoutError
        log.debug("Timeout after %d ms: %s", timeout_ms, url)
        return CheckOutcome.timeout(timeout_ms)
    except (ClientError, OSError, ValueError) as exc:
        code = error_code(exc)
        log.debug("Transport error for %s: %s (%s)", url, code, exc)
        return CheckOutcome.failure(
            error=code,
            status_text=str(exc) or type(exc).__name__,
            response_time_ms=_elapsed_ms(started),
        )
    except Exception as exc:
        log.exception("Unexpected probe failure for %s", url)
        return CheckOutcome.failure(
            error=str(exc) or type(exc).__name__,
            status_text="Unexpected error",
            response_time_ms=_elapsed_ms(started),
        )

    final_url = response.url if response.url != url else None
    return CheckOutcome(
        status=response.status,
        status_text=response.reason,
        response_time_ms=_elapsed_ms(started),
        redirected=response.redirected or final_url is not None,
        final_url=final_url,
        timed_out=False,
    )
