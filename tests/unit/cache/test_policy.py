# tests/unit/cache/test_policy.py — v1
"""Tests for cache/policy.py — per-type TTLs and cacheability."""

from __future__ import annotations

from datetime import timedelta

from careerpath.cache.policy import TTLPolicy
from careerpath.config.settings import Settings
from careerpath.core.models import ArtifactType


class TestTTLPolicy:
    def test_default_ttls(self):
        policy = TTLPolicy()
        assert policy.ttl_for(ArtifactType.ROADMAP) == timedelta(days=30)
        assert policy.ttl_for(ArtifactType.TOPIC_RESOURCES) == timedelta(days=7)

    def test_recommendations_never_cached(self):
        policy = TTLPolicy()
        assert not policy.is_cacheable(ArtifactType.CAREER_RECOMMENDATION)
        assert policy.ttl_for(ArtifactType.CAREER_RECOMMENDATION) is None

    def test_cacheable_types(self):
        policy = TTLPolicy()
        assert policy.is_cacheable(ArtifactType.ROADMAP)
        assert policy.is_cacheable(ArtifactType.TOPIC_RESOURCES)

    def test_from_settings(self):
        s = Settings(
            _env_file=None, cache_roadmap_ttl_days=14, cache_topic_resources_ttl_days=0.5,
        )
        policy = TTLPolicy.from_settings(s)
        assert policy.roadmap == timedelta(days=14)
        assert policy.topic_resources == timedelta(hours=12)
