"""
Redis-backed JSON cache for post reads.

Keys used by the post repository decorator:

    posts:detail:{id}              one serialised post
    posts:recent:{limit}           newest-first list
    posts:list:{page}:{size}:{q}   one page of search results

Redis is optional.  With no client, or after any Redis error, the cache
reports a miss and the caller falls through to the database.
"""
import json
import logging

import redis.asyncio as redis

logger = logging.getLogger(__name__)

_REDIS_ERRORS = (redis.RedisError, OSError)


class CacheManager:
    """Holds the Redis client and the hit/miss counters shown on /metrics."""

    def __init__(self, client: redis.Redis | None = None) -> None:
        self._redis: redis.Redis | None = client
        self._hits = 0
        self._misses = 0

    # --- connection --------------------------------------------------------

    async def connect(self, url: str) -> None:
        """Connect to *url*; an unreachable server leaves the cache switched off."""
        client = redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await client.ping()
        except _REDIS_ERRORS as exc:  # pragma: no cover
            logger.warning("Post cache off, Redis at %s unreachable: %s", url, exc)
            await client.aclose()
            return
        self._redis = client
        logger.info("Post cache using Redis at %s", url)

    async def disconnect(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None

    @property
    def enabled(self) -> bool:
        return self._redis is not None

    # --- reads / writes ----------------------------------------------------

    def _count(self, hit: bool) -> None:
        if hit:
            self._hits += 1
        else:
            self._misses += 1

    async def get(self, key: str) -> dict | list | None:
        raw = None
        if self._redis is not None:
            try:
                raw = await self._redis.get(key)
            except _REDIS_ERRORS as exc:
                logger.debug("Post cache read of %r failed: %s", key, exc)
        self._count(raw is not None)
        return None if raw is None else json.loads(raw)

    async def set(self, key: str, value: dict | list, ttl: int | None = None) -> None:
        """Store *value* as JSON, expiring after *ttl* seconds when given."""
        if self._redis is None:
            return
        try:
            await self._redis.set(key, json.dumps(value, default=str), ex=ttl)
        except _REDIS_ERRORS as exc:
            logger.debug("Post cache write of %r failed: %s", key, exc)

    async def delete_pattern(self, pattern: str) -> None:
        """Drop every key matching the glob *pattern*, walking the keyspace with SCAN."""
        if self._redis is None:
            return
        try:
            doomed = [key async for key in self._redis.scan_iter(match=pattern)]
            if doomed:
                await self._redis.delete(*doomed)
        except _REDIS_ERRORS as exc:
            logger.debug("Post cache purge of %r failed: %s", pattern, exc)
            return
        logger.debug("Post cache purged %d key(s) for %r", len(doomed), pattern)

    async def invalidate_post(self, post_id: str | None = None) -> None:
        """
        Forget everything a post write can make stale.

        Any create, update or delete may shift page boundaries and the
        recent list, so those are always dropped; the detail entry only
        when *post_id* is known.
        """
        for pattern in ("posts:list:*", "posts:recent:*"):
            await self.delete_pattern(pattern)
        if post_id is not None:
            await self.delete_pattern(f"posts:detail:{post_id}")

    @property
    def stats(self) -> dict:
        lookups = self._hits + self._misses
        return {
            "enabled": self.enabled,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(100 * self._hits / lookups, 1) if lookups else 0.0,
        }
