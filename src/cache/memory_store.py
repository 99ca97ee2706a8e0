# src/cache/memory_store.py — v1
"""In-process cache store (CACHE_BACKEND=memory).

Atomicity comes from the store's own asyncio lock, so it is correct for any
number of concurrent tasks within one process. Use sqlite or redis when
several processes serve requests.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from typing import Any

from careerpath.cache.base_cache_store import BaseCacheStore, Clock
from careerpath.cache.models import CacheEntry, CacheMetadata, TypeStats
from careerpath.core.errors import DuplicateKey
from careerpath.core.models import ArtifactType

logger = logging.getLogger(__name__)


class MemoryCacheStore(BaseCacheStore):
    """Dict-backed cache store."""

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self._entries: dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve a live entry by key."""
        entry = self._entries.get(key)
        if entry is None or entry.is_expired(self._now()):
            return None
        return entry.model_copy(deep=True)

    async def put(
        self,
        key: str,
        artifact_type: ArtifactType,
        payload: Any,
        metadata: CacheMetadata | None = None,
        ttl: timedelta | None = None,
    ) -> CacheEntry:
        """Insert a new entry; first writer wins."""
        async with self._lock:
            now = self._now()
            existing = self._entries.get(key)
            if existing is not None and not existing.is_expired(now):
                raise DuplicateKey(key)
            entry = CacheEntry(
                key=key,
                artifact_type=artifact_type,
                payload=payload,
                metadata=metadata or CacheMetadata(),
                created_at=now,
                expires_at=self._expiry(ttl, now),
            )
            self._entries[key] = entry
            return entry.model_copy(deep=True)

    async def record_hit(self, key: str) -> None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                entry.hit_count += 1

    async def sweep_expired(self) -> int:
        async with self._lock:
            now = self._now()
            expired = [k for k, e in self._entries.items() if e.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Swept %d expired in-memory entries", len(expired))
        return len(expired)

    async def stats(self) -> dict[ArtifactType, TypeStats]:
        now = self._now()
        result: dict[ArtifactType, TypeStats] = {}
        for entry in list(self._entries.values()):
            if entry.is_expired(now):
                continue
            bucket = result.setdefault(entry.artifact_type, TypeStats())
            bucket.count += 1
            bucket.total_hits += entry.hit_count
        return result
