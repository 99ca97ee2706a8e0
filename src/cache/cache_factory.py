# src/cache/cache_factory.py — v3
"""Factory for cache store instantiation."""

from __future__ import annotations

from careerpath.cache.base_cache_store import BaseCacheStore, Clock
from careerpath.config.settings import Settings


def create_cache_store(
    settings: Settings | None = None, clock: Clock | None = None,
) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to the SQLite backend.
        clock: Optional time source (tests).

    Returns:
        Configured BaseCacheStore implementation.
    """
    backend = "sqlite" if settings is None else settings.cache_backend

    if backend == "memory":
        from careerpath.cache.memory_store import MemoryCacheStore
        return MemoryCacheStore(clock=clock)

    if backend == "sqlite":
        from careerpath.cache.sqlite_store import SqliteCacheStore
        cache_root = "~/.careerpath/cache" if settings is None else str(settings.cache_root)
        return SqliteCacheStore(db_path=f"{cache_root}/careerpath_cache.db", clock=clock)

    if backend == "redis":
        from careerpath.cache.redis_store import RedisCacheStore
        if settings is None or not settings.cache_redis_url:
            raise ValueError(
                "CACHE_REDIS_URL must be set when CACHE_BACKEND=redis"
            )
        return RedisCacheStore(redis_url=settings.cache_redis_url, clock=clock)

    raise ValueError(f"Unsupported cache backend: {backend!r}")
