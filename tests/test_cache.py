"""
Cache tests: CacheManager degradation and the cache-aside repository.

A small in-process stand-in for ``redis.asyncio.Redis`` implements the
handful of commands CacheManager issues, so no Redis server is needed.
"""
import fnmatch
import time

import pytest
import redis.asyncio as redis

from conftest import make_post, seed_posts
from news_app.cache import CacheManager
from news_app.domain import InvalidIDError, NotFoundError, StorageError
from news_app.repositories import CachedPostRepository, InMemoryPostRepository


class FakeRedis:
    def __init__(self, fail: bool = False) -> None:
        self.store: dict[str, str] = {}
        self.fail = fail

    def _check(self):
        if self.fail:
            raise redis.ConnectionError("redis is down")

    async def get(self, key):
        self._check()
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self._check()
        self.store[key] = value

    async def scan_iter(self, match="*"):
        self._check()
        for key in list(self.store):
            if fnmatch.fnmatchcase(key, match):
                yield key

    async def delete(self, *keys):
        self._check()
        for key in keys:
            self.store.pop(key, None)

    async def aclose(self):
        pass


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def inner() -> InMemoryPostRepository:
    return InMemoryPostRepository()


@pytest.fixture
def cached(inner, fake_redis) -> CachedPostRepository:
    return CachedPostRepository(inner, CacheManager(fake_redis), list_ttl=60, detail_ttl=300)


# ---------------------------------------------------------------------------
# CacheManager
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_cache_without_redis_is_a_no_op():
    cache = CacheManager()
    await cache.set("posts:list:1", {"a": 1})
    assert await cache.get("posts:list:1") is None
    await cache.invalidate_post("abc")
    assert cache.stats == {"enabled": False, "hits": 0, "misses": 1, "hit_rate": 0.0}


@pytest.mark.asyncio
async def test_cache_round_trip_and_stats(fake_redis):
    cache = CacheManager(fake_redis)
    await cache.set("posts:detail:1", {"title": "Cached"})
    assert await cache.get("posts:detail:1") == {"title": "Cached"}
    assert await cache.get("posts:detail:2") is None
    assert cache.stats["hits"] == 1
    assert cache.stats["misses"] == 1
    assert cache.stats["hit_rate"] == 50.0


@pytest.mark.asyncio
async def test_cache_errors_degrade_to_misses():
    cache = CacheManager(FakeRedis(fail=True))
    await cache.set("posts:detail:1", {"title": "Cached"})
    assert await cache.get("posts:detail:1") is None
    await cache.delete_pattern("posts:*")


@pytest.mark.asyncio
async def test_invalidate_post_purges_lists_and_detail(fake_redis):
    cache = CacheManager(fake_redis)
    for key in ("posts:list:1:9:", "posts:recent:5", "posts:detail:a", "posts:detail:b"):
        await cache.set(key, {})
    await cache.invalidate_post("a")
    assert set(fake_redis.store) == {"posts:detail:b"}


# ---------------------------------------------------------------------------
# CachedPostRepository
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_paginated_read_is_served_from_cache(cached, inner):
    await seed_posts(cached, 3)
    first = await cached.get_paginated(1, 9, "")
    assert first.total_count == 3

    # Written behind the cache's back: the cached page stays stale.
    await inner.create(make_post(10))
    assert (await cached.get_paginated(1, 9, "")).total_count == 3


@pytest.mark.asyncio
async def test_write_through_cache_invalidates_lists(cached):
    await seed_posts(cached, 3)
    await cached.get_paginated(1, 9, "")
    await cached.get_recent(5)

    await cached.create(make_post(10))

    assert (await cached.get_paginated(1, 9, "")).total_count == 4
    assert (await cached.get_recent(5))[0].title == "Title 10"


@pytest.mark.asyncio
async def test_cached_detail_round_trip(cached):
    post = make_post(1)
    await cached.create(post)

    first = await cached.get_by_id(post.id)
    second = await cached.get_by_id(post.id)

    assert first == second == post


@pytest.mark.asyncio
async def test_update_and_delete_invalidate_detail(cached):
    post = make_post(1)
    await cached.create(post)
    await cached.get_by_id(post.id)

    post.update("Fresh title", "Fresh content body")
    await cached.update(post)
    assert (await cached.get_by_id(post.id)).title == "Fresh title"

    await cached.delete(post.id)
    with pytest.raises(NotFoundError):
        await cached.get_by_id(post.id)


@pytest.mark.asyncio
async def test_errors_from_wrapped_repository_propagate(cached):
    with pytest.raises(InvalidIDError):
        await cached.get_by_id("nope")
    with pytest.raises(NotFoundError):
        await cached.delete("0123456789abcdef01234567")


@pytest.mark.asyncio
async def test_expired_deadline_fails_even_on_cache_hit(cached):
    await seed_posts(cached, 2)
    await cached.get_paginated(1, 9, "")
    with pytest.raises(StorageError) as exc_info:
        await cached.get_paginated(1, 9, "", deadline=time.monotonic() - 1)
    assert exc_info.value.timed_out is True


@pytest.mark.asyncio
async def test_cache_outage_falls_back_to_store(inner):
    cached = CachedPostRepository(inner, CacheManager(FakeRedis(fail=True)))
    await seed_posts(cached, 2)
    assert (await cached.get_paginated(1, 9, "")).total_count == 2
