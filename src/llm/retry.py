# src/llm/retry.py — v2
"""Bounded retry with exponential backoff for generation calls.

Owned by the orchestrator: the content generator never retries on its own,
so the total number of attempts per request is decided in one place.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from careerpath.core.errors import GenerationFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """``max_retries`` extra attempts after the first one."""

    max_retries: int = 1
    base_delay_s: float = 1.0
    backoff_factor: float = 2.0
    jitter: bool = True

    def delay_for(self, attempt: int) -> float:
        """Delay before retry number ``attempt`` (0-based)."""
        delay = self.base_delay_s * (self.backoff_factor ** attempt)
        if self.jitter:
            delay *= 0.5 + random.random()  # noqa: S311
        return delay


NO_RETRY = RetryPolicy(max_retries=0, base_delay_s=0.0, jitter=False)


async def with_retry(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    policy: RetryPolicy = NO_RETRY,
    retry_on: tuple[type[BaseException], ...] = (GenerationFailed,),
    label: str = "generation",
    **kwargs: Any,
) -> Any:
    """Execute an async function, retrying only on ``retry_on`` errors.

    Any other exception propagates immediately. Once retries are spent the
    last error is re-raised unchanged.
    """
    attempt = 0
    while True:
        try:
            return await fn(*args, **kwargs)
        except retry_on as e:
            if attempt >= policy.max_retries:
                raise
            delay = policy.delay_for(attempt)
            attempt += 1
            logger.warning(
                "%s failed (attempt %d/%d): %s; retrying in %.1fs",
                label, attempt, policy.max_retries + 1, e, delay,
            )
            await asyncio.sleep(delay)
