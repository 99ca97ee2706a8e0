# src/cache/redis_store.py — v3
"""Redis-based cache store (CACHE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Suitable for distributed/multi-instance deployments.

Layout per cache key:
  <prefix>entry:<key>   hash {doc, exp, hits}, native expiry on the whole hash
  <prefix>index:<type>  set of keys per artifact type, for stats and sweeps

Every write runs as one server-side Lua script, so a put, a hit and a sweep
of the same key never interleave across workers. ``exp`` is the entry's
expiry in epoch milliseconds ("" when it never expires); scripts compare it
against the caller's clock so Redis agrees with every other backend on what
counts as expired.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any

from careerpath.cache.base_cache_store import BaseCacheStore, Clock
from careerpath.cache.models import CacheEntry, CacheMetadata, TypeStats
from careerpath.core.errors import DuplicateKey, StoreUnavailable
from careerpath.core.models import ArtifactType

logger = logging.getLogger(__name__)

_KEY_PREFIX = "careerpath:cache:"

# KEYS: entry, index. ARGV: doc, px ("" = no expiry), now_ms, exp_ms, key.
# Returns 1 when written, 0 when a live entry already holds the key.
PUT_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 1 then
  local exp = redis.call('HGET', KEYS[1], 'exp')
  if not exp or exp == '' or tonumber(exp) > tonumber(ARGV[3]) then
    return 0
  end
  redis.call('DEL', KEYS[1])
end
redis.call('HSET', KEYS[1], 'doc', ARGV[1], 'exp', ARGV[4], 'hits', 0)
if ARGV[2] ~= '' then
  redis.call('PEXPIRE', KEYS[1], ARGV[2])
end
redis.call('SADD', KEYS[2], ARGV[5])
return 1
"""

# KEYS: entry. ARGV: now_ms. Returns the new count, or -1 if no live entry.
HIT_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 0 then
  return -1
end
local exp = redis.call('HGET', KEYS[1], 'exp')
if exp and exp ~= '' and tonumber(exp) <= tonumber(ARGV[1]) then
  return -1
end
return redis.call('HINCRBY', KEYS[1], 'hits', 1)
"""

# KEYS: entry, index. ARGV: now_ms, key. Returns 1 if the member was dropped.
SWEEP_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 1 then
  local exp = redis.call('HGET', KEYS[1], 'exp')
  if not exp or exp == '' or tonumber(exp) > tonumber(ARGV[1]) then
    return 0
  end
  redis.call('DEL', KEYS[1])
end
redis.call('SREM', KEYS[2], ARGV[2])
return 1
"""


def _epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class RedisCacheStore(BaseCacheStore):
    """Redis-backed cache store for distributed deployments."""

    def __init__(self, redis_url: str, clock: Clock | None = None) -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._setup(redis.Redis.from_url(redis_url, decode_responses=True), clock)

    @classmethod
    def from_client(cls, client: Any, clock: Clock | None = None) -> RedisCacheStore:
        """Wrap an existing (already configured) Redis client."""
        store = cls.__new__(cls)
        store._setup(client, clock)
        return store

    def _setup(self, client: Any, clock: Clock | None) -> None:
        from redis.exceptions import RedisError

        BaseCacheStore.__init__(self, clock)
        self._client = client
        self._errors: tuple[type[BaseException], ...] = (RedisError, OSError)
        self._put_script = client.register_script(PUT_SCRIPT)
        self._hit_script = client.register_script(HIT_SCRIPT)
        self._sweep_script = client.register_script(SWEEP_SCRIPT)

    @contextmanager
    def _guard(self) -> Iterator[None]:
        try:
            yield
        except self._errors as e:
            raise StoreUnavailable(f"Redis cache error: {e}") from e

    @staticmethod
    def _entry_key(key: str) -> str:
        return f"{_KEY_PREFIX}entry:{key}"

    @staticmethod
    def _index_key(artifact_type: ArtifactType) -> str:
        return f"{_KEY_PREFIX}index:{artifact_type.value}"

    def _read(self, key: str) -> CacheEntry | None:
        doc, hits = self._client.hmget(self._entry_key(key), ["doc", "hits"])
        if doc is None:
            return None
        entry = CacheEntry.model_validate_json(doc)
        entry.hit_count = int(hits or 0)
        return entry

    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve a live entry by key."""
        with self._guard():
            entry = self._read(key)
        if entry is None or entry.is_expired(self._now()):
            return None
        return entry

    async def put(
        self,
        key: str,
        artifact_type: ArtifactType,
        payload: Any,
        metadata: CacheMetadata | None = None,
        ttl: timedelta | None = None,
    ) -> CacheEntry:
        """Insert atomically; a clock-expired entry is replaced in the same step."""
        now = self._now()
        entry = CacheEntry(
            key=key,
            artifact_type=artifact_type,
            payload=payload,
            metadata=metadata or CacheMetadata(),
            created_at=now,
            expires_at=self._expiry(ttl, now),
        )
        px = "" if ttl is None else max(int(ttl.total_seconds() * 1000), 1)
        exp = "" if entry.expires_at is None else _epoch_ms(entry.expires_at)

        with self._guard():
            created = self._put_script(
                keys=[self._entry_key(key), self._index_key(artifact_type)],
                args=[
                    entry.model_dump_json(exclude={"hit_count"}),
                    px, _epoch_ms(now), exp, key,
                ],
            )
        if not int(created):
            raise DuplicateKey(key)
        return entry

    async def record_hit(self, key: str) -> None:
        with self._guard():
            self._hit_script(keys=[self._entry_key(key)], args=[_epoch_ms(self._now())])

    async def sweep_expired(self) -> int:
        """Drop expired entries and index members whose entry Redis already evicted."""
        removed = 0
        now_ms = _epoch_ms(self._now())
        with self._guard():
            for artifact_type in ArtifactType:
                index_key = self._index_key(artifact_type)
                for key in self._client.smembers(index_key):
                    removed += int(
                        self._sweep_script(
                            keys=[self._entry_key(key), index_key], args=[now_ms, key],
                        )
                    )
        if removed:
            logger.debug("Swept %d expired Redis entries", removed)
        return removed

    async def stats(self) -> dict[ArtifactType, TypeStats]:
        result: dict[ArtifactType, TypeStats] = {}
        now = self._now()
        with self._guard():
            for artifact_type in ArtifactType:
                for key in self._client.smembers(self._index_key(artifact_type)):
                    entry = self._read(key)
                    if entry is None or entry.is_expired(now):
                        continue
                    bucket = result.setdefault(artifact_type, TypeStats())
                    bucket.count += 1
                    bucket.total_hits += entry.hit_count
        return result

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()
