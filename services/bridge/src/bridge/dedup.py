"""Seen ledger: remembers which source blocks were already transferred.

A claim is taken before a block is transferred and released if the transfer
fails, so a redelivered webhook can try again. The Redis ledger is shared by
every instance and survives restarts; the in-memory ledger lives only as long
as the process.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

import redis.asyncio as aioredis

from common.config import Settings
from common.logging import get_logger

LOGGER = get_logger(__name__)


class SeenLedger(Protocol):
    async def claim(self, key: str) -> bool:
        """Mark ``key`` as seen; False if it already was."""

    async def release(self, key: str) -> None:
        """Forget ``key`` so it can be claimed again."""

    async def contains(self, key: str) -> bool:
        ...


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class InMemorySeenLedger:
    """Process-lifetime ledger."""

    def __init__(self) -> None:
        self._seen: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def claim(self, key: str) -> bool:
        async with self._lock:
            if key in self._seen:
                return False
            self._seen[key] = _now()
            return True

    async def release(self, key: str) -> None:
        async with self._lock:
            self._seen.pop(key, None)

    async def contains(self, key: str) -> bool:
        return key in self._seen

    def __len__(self) -> int:
        return len(self._seen)


class RedisSeenLedger:
    """Durable ledger keyed by block id, valued by claim timestamp."""

    KEY_PREFIX = "bridge:seen:"

    def __init__(self, client: aioredis.Redis, ttl_seconds: Optional[int] = None) -> None:
        self._redis = client
        self._ttl_seconds = ttl_seconds

    @classmethod
    def from_url(cls, url: str, ttl_seconds: Optional[int] = None) -> "RedisSeenLedger":
        return cls(aioredis.from_url(url, decode_responses=True), ttl_seconds=ttl_seconds)

    def _key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}{key}"

    async def claim(self, key: str) -> bool:
        # SET NX makes the claim atomic across concurrent instances
        acquired = await self._redis.set(self._key(key), _now(), ex=self._ttl_seconds, nx=True)
        return bool(acquired)

    async def release(self, key: str) -> None:
        await self._redis.delete(self._key(key))

    async def contains(self, key: str) -> bool:
        return bool(await self._redis.exists(self._key(key)))


def build_ledger(config: Settings) -> SeenLedger:
    if config.redis_url:
        LOGGER.info("Using Redis seen ledger", ttl_seconds=config.seen_ttl_seconds)
        return RedisSeenLedger.from_url(config.redis_url, ttl_seconds=config.seen_ttl_seconds)
    LOGGER.info("Using in-memory seen ledger")
    return InMemorySeenLedger()


__all__ = ["InMemorySeenLedger", "RedisSeenLedger", "SeenLedger", "build_ledger"]
