# src/cache/policy.py — v1
"""Per-artifact-type expiry policy.

Career recommendations are personalized, so they are never cached: storing
one user's answer would serve it to the next user with a different profile.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from careerpath.config.settings import Settings
from careerpath.core.models import ArtifactType


@dataclass(frozen=True)
class TTLPolicy:
    """TTL table; a ``None`` TTL stores entries without expiry."""

    roadmap: timedelta | None = timedelta(days=30)
    topic_resources: timedelta | None = timedelta(days=7)

    @classmethod
    def from_settings(cls, settings: Settings) -> TTLPolicy:
        return cls(
            roadmap=timedelta(days=settings.cache_roadmap_ttl_days),
            topic_resources=timedelta(days=settings.cache_topic_resources_ttl_days),
        )

    def is_cacheable(self, artifact_type: ArtifactType) -> bool:
        return artifact_type is not ArtifactType.CAREER_RECOMMENDATION

    def ttl_for(self, artifact_type: ArtifactType) -> timedelta | None:
        if artifact_type is ArtifactType.ROADMAP:
            return self.roadmap
        if artifact_type is ArtifactType.TOPIC_RESOURCES:
            return self.topic_resources
        return None
