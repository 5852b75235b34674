"""Redis store for caching, view counters and trending.

Handles:
- Metadata cache with TTL (cache-aside)
- Atomic view counters
- Daily trending sorted set

TTL policies:
- Content metadata: 1 hour (expiry is the only invalidation)
- View counters: no TTL (Redis is the only source of truth)
- Trending: no TTL, bucketed by a fixed "daily" key
"""

import json
from typing import Any

import redis.asyncio as redis

# TTL constants (in seconds)
TTL_CONTENT_METADATA = 3600  # 1 hour

# Key prefixes
PREFIX_METADATA = "content:metadata:"
PREFIX_VIEWS = "content:views:"
KEY_TRENDING_DAILY = "trending:daily"


def metadata_key(content_id: str) -> str:
    return f"{PREFIX_METADATA}{content_id}"


def views_key(content_id: str) -> str:
    return f"{PREFIX_VIEWS}{content_id}"


class CacheStore:
    """Shared Redis client wrapper.

    One instance is created at startup; the underlying client keeps its own
    connection pool.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._redis = client

    @classmethod
    def from_url(cls, url: str) -> "CacheStore":
        """Build a store from a redis:// or rediss:// URL."""
        client = redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
        )
        return cls(client)

    async def ping(self) -> None:
        await self._redis.ping()

    async def close(self) -> None:
        """Close Redis connection."""
        await self._redis.aclose()

    async def flush(self) -> None:
        """Drop every key in the current DB (seeding only)."""
        await self._redis.flushdb()

    # ============================================================
    # Generic cache operations
    # ============================================================

    async def get(self, key: str) -> str | None:
        """Get value from cache.

        Args:
            key: Cache key.

        Returns:
            Cached value or None if not found.
        """
        return await self._redis.get(key)

    async def set(self, key: str, value: str, ttl: int) -> None:
        """Set value in cache with TTL.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Time-to-live in seconds.
        """
        await self._redis.setex(key, ttl, value)

    async def get_json(self, key: str) -> dict[str, Any] | None:
        """Get JSON value from cache.

        Returns:
            Parsed JSON dict or None if not found.
        """
        value = await self.get(key)
        if value:
            return json.loads(value)
        return None

    async def set_json(self, key: str, value: dict[str, Any], ttl: int) -> None:
        """Set JSON value in cache."""
        await self.set(key, json.dumps(value), ttl)

    # ============================================================
    # Counters and sorted sets
    # ============================================================

    async def incr(self, key: str) -> int:
        """Atomically increment an integer key, creating it at 0 if absent."""
        return await self._redis.incr(key)

    async def get_int(self, key: str) -> int | None:
        value = await self.get(key)
        return int(value) if value is not None else None

    async def top_scores(self, key: str, limit: int) -> list[tuple[str, float]]:
        """Highest-scored members of a sorted set, descending.

        Returns:
            (member, score) pairs, at most `limit` of them.
        """
        return await self._redis.zrevrange(key, 0, limit - 1, withscores=True)

    async def incr_score(self, key: str, member: str, amount: float) -> float:
        """Add `amount` to a sorted set member's score."""
        return await self._redis.zincrby(key, amount, member)
