# src/cache/base_cache_store.py — v2
"""Abstract cache store interface.

Contract shared by every backend:
  - get() treats an entry past ``expires_at`` as absent, swept or not.
  - put() is write-once: a live entry under the same key raises DuplicateKey,
    and the check-and-insert is atomic in the backend.
  - record_hit() is an atomic increment inside the backend.
  - Driver failures surface as StoreUnavailable, never as a miss.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from careerpath.cache.models import CacheEntry, CacheMetadata, TypeStats
from careerpath.core.models import ArtifactType

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseCacheStore(ABC):
    """Unified interface for cache storage backends."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or utcnow

    def _now(self) -> datetime:
        return self._clock()

    def _expiry(self, ttl: timedelta | None, now: datetime) -> datetime | None:
        return None if ttl is None else now + ttl

    @abstractmethod
    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve a live entry by key, or None."""

    @abstractmethod
    async def put(
        self,
        key: str,
        artifact_type: ArtifactType,
        payload: Any,
        metadata: CacheMetadata | None = None,
        ttl: timedelta | None = None,
    ) -> CacheEntry:
        """Insert a new entry.

        Raises:
            DuplicateKey: If a live entry already exists under ``key``.
        """

    @abstractmethod
    async def record_hit(self, key: str) -> None:
        """Atomically increment ``hit_count`` for ``key``."""

    @abstractmethod
    async def sweep_expired(self) -> int:
        """Physically remove expired entries. Returns the count removed."""

    @abstractmethod
    async def stats(self) -> dict[ArtifactType, TypeStats]:
        """Per-type entry count and total hits over live entries."""

    def close(self) -> None:
        """Release backend resources."""
