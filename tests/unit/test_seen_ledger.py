import pytest

from bridge.dedup import InMemorySeenLedger, RedisSeenLedger, build_ledger


class DummyRedis:
    """Minimal async stand-in for the redis commands the ledger uses."""

    def __init__(self):
        self.store = {}
        self.expiries = {}

    async def set(self, key, value, ex=None, nx=False):
        if nx and key in self.store:
            return None
        self.store[key] = value
        self.expiries[key] = ex
        return True

    async def delete(self, key):
        return 1 if self.store.pop(key, None) is not None else 0

    async def exists(self, key):
        return 1 if key in self.store else 0


@pytest.mark.asyncio
async def test_memory_ledger_claims_once():
    ledger = InMemorySeenLedger()

    assert await ledger.claim("blk-1") is True
    assert await ledger.claim("blk-1") is False
    assert await ledger.contains("blk-1")
    assert len(ledger) == 1


@pytest.mark.asyncio
async def test_memory_ledger_release_allows_reclaim():
    ledger = InMemorySeenLedger()
    await ledger.claim("blk-1")
    await ledger.release("blk-1")

    assert not await ledger.contains("blk-1")
    assert await ledger.claim("blk-1") is True


@pytest.mark.asyncio
async def test_redis_ledger_uses_set_nx_with_ttl():
    redis = DummyRedis()
    ledger = RedisSeenLedger(redis, ttl_seconds=60)

    assert await ledger.claim("blk-9") is True
    assert await ledger.claim("blk-9") is False
    assert redis.expiries["bridge:seen:blk-9"] == 60
    assert await ledger.contains("blk-9")

    await ledger.release("blk-9")
    assert not await ledger.contains("blk-9")


def test_build_ledger_defaults_to_memory(bridge_settings):
    assert isinstance(build_ledger(bridge_settings), InMemorySeenLedger)


def test_build_ledger_uses_redis_when_configured(bridge_settings):
    bridge_settings.redis_url = "redis://localhost:6379/3"
    assert isinstance(build_ledger(bridge_settings), RedisSeenLedger)
