# src/logging/context.py — v2
"""Contextual logging support — attach request_id, artifact_type, cache_key to log records.

Context variables follow asyncio tasks, so concurrent requests never see
each other's values.
"""

from __future__ import annotations

import contextvars
import uuid
from dataclasses import dataclass
from typing import Any

_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_artifact_type: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "artifact_type", default=None
)
_cache_key: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "cache_key", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    artifact_type: str | None = None
    cache_key: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        artifact_type=_artifact_type.get(),
        cache_key=_cache_key.get(),
    )


def set_request_context(request_id: str | None = None) -> str:
    """Set the request id (generated when omitted). Returns it."""
    rid = request_id or uuid.uuid4().hex[:12]
    _request_id.set(rid)
    return rid


def set_artifact_context(artifact_type: str, cache_key: str | None = None) -> None:
    """Set artifact-level context (called per obtain)."""
    _artifact_type.set(artifact_type)
    _cache_key.set(cache_key)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _artifact_type.set(None)
    _cache_key.set(None)
