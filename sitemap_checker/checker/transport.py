# sitemap_checker/checker/transport.py
"""
Transport layer: a thin HEAD-only wrapper around aiohttp.

The probe talks to anything with an ``async head(url, headers)`` method, so the
checker can be driven by a fake transport in tests.
"""
from __future__ import annotations

from typing import Mapping, Optional, Protocol

from aiohttp import ClientSession, ClientTimeout, TCPConnector

from sitemap_checker.checker.models import HeadResponse


class Transport(Protocol):
    async def head(self, url: str, headers: Mapping[str, str]) -> HeadResponse: ...


class AiohttpTransport:
    """HEAD requests over a shared aiohttp session, redirects followed."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    @classmethod
    def create(
        cls,
        *,
        limit: int,
        timeout_seconds: float,
        headers: Optional[Mapping[str, str]] = None,
    ) -> AiohttpTransport:
        session = ClientSession(
            connector=TCPConnector(limit=limit),
            timeout=ClientTimeout(total=timeout_seconds),
            headers=dict(headers or {}),
            raise_for_status=False,
        )
        return cls(session)

    async def head(self, url: str, headers: Mapping[str, str]) -> HeadResponse:
        async with self.session.head(url, headers=dict(headers), allow_redirects=True) as resp:
            redirected = bool(resp.history)
            # aiohttp re-encodes the request URL, keep the caller's spelling if nothing moved
            return HeadResponse(
                status=resp.status,
                reason=resp.reason or "",
                url=str(resp.url) if redirected else url,
                redirected=redirected,
            )

    async def close(self) -> None:
        if not self.session.closed:
            await self.session.close()
