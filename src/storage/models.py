# src/storage/models.py — v2
"""Durable record models: RoadmapRecord."""

from __future__ import annotations

from datetime import datetime

from careerpath.core.models import RoadmapArtifact


class RoadmapRecord(RoadmapArtifact):
    """A roadmap persisted for steady-state reads, independent of the cache."""

    generated_at: datetime
    last_updated: datetime
    version: int = 1

    def to_artifact(self) -> RoadmapArtifact:
        return RoadmapArtifact.model_validate(
            self.model_dump(exclude={"generated_at", "last_updated", "version"})
        )
