# src/cache/sweeper.py — v1
"""Time-triggered purge of expired cache entries.

Runs beside request handling, never inside it. A failed sweep is logged and
retried on the next tick; lookups already hide expired entries, so a missed
sweep only delays reclaiming space.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from careerpath.cache.base_cache_store import BaseCacheStore
from careerpath.core.errors import StoreUnavailable

logger = logging.getLogger(__name__)


class ExpirySweeper:
    """Periodically calls ``store.sweep_expired()`` on the running loop."""

    def __init__(self, store: BaseCacheStore, interval_s: float = 3600.0) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        self._store = store
        self._interval_s = interval_s
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> int:
        """Run a single sweep. Returns entries removed (0 on store failure)."""
        try:
            removed = await self._store.sweep_expired()
        except StoreUnavailable as e:
            logger.error("Expiry sweep failed: %s", e)
            return 0
        if removed:
            logger.info("Expiry sweep removed %d entries", removed)
        return removed

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval_s)
            await self.run_once()

    def start(self) -> None:
        """Start the background loop (idempotent)."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._loop(), name="careerpath-expiry-sweeper",
        )
        logger.debug("Expiry sweeper started (interval=%.0fs)", self._interval_s)

    async def stop(self) -> None:
        """Cancel the background loop and wait for it to exit."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
