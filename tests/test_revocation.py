from datetime import datetime, timedelta, timezone

from redis.exceptions import ConnectionError as RedisConnectionError

from uaifood.services.revocation import (
    MemoryTokenBlacklist,
    RedisTokenBlacklist,
    get_token_blacklist,
    reset_token_blacklist,
)


def in_minutes(minutes):
    return datetime.now(timezone.utc) + timedelta(minutes=minutes)


class FakeRedis:
    def __init__(self, reachable=True):
        self.store = {}
        self.reachable = reachable
        self.closed = False

    async def set(self, key, value, ex=None):
        self.store[key] = (value, ex)

    async def exists(self, key):
        return int(key in self.store)

    async def ping(self):
        if not self.reachable:
            raise RedisConnectionError("down")
        return True

    async def aclose(self):
        self.closed = True


async def test_memory_blacklist_revokes_until_expiry():
    blacklist = MemoryTokenBlacklist()

    await blacklist.revoke("abc", in_minutes(5))

    assert await blacklist.is_revoked("abc")
    assert not await blacklist.is_revoked("other")
    assert len(blacklist) == 1


async def test_memory_blacklist_forgets_expired_tokens():
    blacklist = MemoryTokenBlacklist()

    await blacklist.revoke("old", in_minutes(-1))

    assert not await blacklist.is_revoked("old")
    assert len(blacklist) == 0


async def test_redis_blacklist_sets_key_with_remaining_ttl():
    fake = FakeRedis()
    blacklist = RedisTokenBlacklist(client=fake)

    await blacklist.revoke("abc", in_minutes(10))

    value, ttl = fake.store["revoked:abc"]
    assert 590 <= ttl <= 601
    assert await blacklist.is_revoked("abc")
    assert not await blacklist.is_revoked("nope")


async def test_redis_blacklist_health_and_close():
    fake = FakeRedis(reachable=False)
    blacklist = RedisTokenBlacklist(client=fake)

    assert await blacklist.health_check() is False
    await blacklist.close()
    assert fake.closed


def test_factory_uses_memory_store_in_development():
    reset_token_blacklist()
    try:
        blacklist = get_token_blacklist()
        assert blacklist.provider_name == "memory"
        assert get_token_blacklist() is blacklist
    finally:
        reset_token_blacklist()
