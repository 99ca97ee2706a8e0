# src/core/errors.py — v1
"""Error taxonomy shared by the cache, generation and service layers.

Absence is never an error: lookups return None for "not found".
"""

from __future__ import annotations


class CareerPathError(Exception):
    """Base class for all careerpath errors."""


class StoreUnavailable(CareerPathError):
    """The storage layer could not be reached or failed mid-operation.

    Never equivalent to a cache miss: a miss means "confirmed absent".
    """


class DuplicateKey(CareerPathError):
    """A live entry already exists under the key (write-once violation)."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Cache key already present: {key!r}")


class UncacheableArtifact(CareerPathError, ValueError):
    """The artifact type is never stored, so it has no cache key."""


class GeneratorUnavailable(CareerPathError):
    """No AI client is configured (missing credentials or provider)."""


class GenerationFailed(CareerPathError):
    """The AI call errored, timed out, or returned unusable content."""


class PayloadParseError(GenerationFailed):
    """No structured JSON could be extracted from model output."""
