# src/cache/models.py — v2
"""Cache domain models: CacheMetadata, CacheEntry, TypeStats."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from careerpath.core.models import ArtifactType


class CacheMetadata(BaseModel):
    """Denormalized fields for analytics and compound queries, not identity."""

    domain: str | None = None
    career_id: str | None = None
    schema_version: int = 1


class CacheEntry(BaseModel):
    """A generated artifact stored under a unique, write-once key."""

    key: str
    artifact_type: ArtifactType
    payload: Any
    metadata: CacheMetadata = Field(default_factory=CacheMetadata)
    hit_count: int = Field(default=0, ge=0)
    created_at: datetime
    expires_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        """True once ``now`` reaches ``expires_at``."""
        return self.expires_at is not None and now >= self.expires_at


class TypeStats(BaseModel):
    """Aggregate per artifact type."""

    count: int = 0
    total_hits: int = 0
