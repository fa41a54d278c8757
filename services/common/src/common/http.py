"""Standard HTTP client helpers for external integrations."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Mapping, Optional

import httpx

USER_AGENT = "monday-notion-bridge/1.0"


def _build_headers(
    bearer_token: Optional[str],
    authorization: Optional[str],
    extra: Optional[Mapping[str, str]],
) -> Dict[str, str]:
    headers: Dict[str, str] = {"User-Agent": USER_AGENT}
    if bearer_token:
        headers["Authorization"] = f"Bearer {bearer_token}"
    elif authorization:
        # monday.com expects the raw API token, no scheme
        headers["Authorization"] = authorization
    if extra:
        headers.update(extra)
    return headers


@asynccontextmanager
async def http_client(
    base_url: Optional[str] = None,
    bearer_token: Optional[str] = None,
    authorization: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Provide a configured async HTTP client."""

    async with httpx.AsyncClient(
        base_url=base_url or "",
        timeout=timeout,
        headers=_build_headers(bearer_token, authorization, headers),
        transport=transport,
        follow_redirects=True,
    ) as client:
        yield client


__all__ = ["http_client"]
