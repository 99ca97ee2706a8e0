# src/service/orchestrator.py — v1
"""Cache-aside orchestrator: the single entry point for obtaining artifacts.

Flow for cacheable types (roadmap, topic_resources):
  1. derive the key
  2. store.get(key): on a hit, record_hit(key) and return the payload
  3. on a miss, generate; then put(key, ..., ttl)
       DuplicateKey     -> another caller won the race: re-read and return theirs
       StoreUnavailable -> return the fresh result uncached, log the failure
  4. generation failure -> degraded placeholder with an error marker, not cached

Career recommendations are personalized and bypass the store entirely; their
generation errors propagate to the caller.

Concurrency: no lock spans requests. Write-once uniqueness and hit counting
are the store's guarantees. Concurrent misses may generate twice unless
``single_flight`` is enabled, in which case callers in this process await a
single fill. The fill runs in its own task behind ``asyncio.shield``, so a
cancelled caller does not abort generation or the cache write.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, cast

from pydantic import ValidationError

from careerpath.cache.base_cache_store import BaseCacheStore
from careerpath.cache.keys import CACHE_SCHEMA_VERSION, derive_key
from careerpath.cache.models import CacheEntry, CacheMetadata, TypeStats
from careerpath.cache.policy import TTLPolicy
from careerpath.core.errors import (
    DuplicateKey,
    GenerationFailed,
    GeneratorUnavailable,
    StoreUnavailable,
)
from careerpath.core.models import (
    Artifact,
    ArtifactType,
    AssessmentProfile,
    CareerRecommendation,
    CareerRecommendationSet,
    Resource,
    RoadmapArtifact,
    TopicResourcesArtifact,
    validate_payload,
)
from careerpath.generation.generator import ContentGenerator
from careerpath.llm.retry import NO_RETRY, RetryPolicy, with_retry
from careerpath.logging.context import set_artifact_context

logger = logging.getLogger(__name__)

ROADMAP_ERROR = "Failed to generate roadmap. Please try again."
RESOURCES_ERROR = "Failed to find resources for this topic. Please try again."


def degraded_artifact(artifact_type: ArtifactType, params: Mapping[str, Any]) -> Artifact:
    """Placeholder carrying the identity fields and an explicit error marker."""
    if artifact_type is ArtifactType.ROADMAP:
        career_id = str(params["career_id"])
        return RoadmapArtifact(
            roadmap_id=f"{career_id}_roadmap",
            career_id=career_id,
            domain=params.get("domain") or "general",
            career_name=params.get("career_name") or career_id,
            modules=[],
            error=ROADMAP_ERROR,
        )
    if artifact_type is ArtifactType.TOPIC_RESOURCES:
        return TopicResourcesArtifact(
            topic_name=str(params["topic_name"]),
            domain=params.get("domain") or "general",
            resources=[],
            error=RESOURCES_ERROR,
        )
    raise ValueError(f"No degraded form for {artifact_type.value}")


class CacheAsideOrchestrator:
    """Makes the cache transparent to callers asking for artifacts by identity."""

    def __init__(
        self,
        store: BaseCacheStore,
        generator: ContentGenerator,
        policy: TTLPolicy | None = None,
        retry_policy: RetryPolicy = NO_RETRY,
        schema_version: int = CACHE_SCHEMA_VERSION,
        single_flight: bool = False,
    ) -> None:
        self._store = store
        self._generator = generator
        self._policy = policy or TTLPolicy()
        self._retry_policy = retry_policy
        self._schema_version = schema_version
        self._single_flight = single_flight
        self._inflight: dict[str, asyncio.Task[Artifact]] = {}
        self._background: set[asyncio.Task[Artifact]] = set()

    @property
    def store(self) -> BaseCacheStore:
        return self._store

    # --- Generic protocol ---

    async def obtain(
        self, artifact_type: ArtifactType | str, params: Mapping[str, Any],
    ) -> Artifact:
        """Return the artifact for ``(artifact_type, params)``.

        Raises:
            GeneratorUnavailable, GenerationFailed: Only for career
                recommendations; cacheable types degrade instead.
        """
        artifact_type = ArtifactType(artifact_type)

        if not self._policy.is_cacheable(artifact_type):
            set_artifact_context(artifact_type.value)
            return await self._generate(artifact_type, params)

        key = derive_key(artifact_type, params, self._schema_version)
        set_artifact_context(artifact_type.value, key)
        try:
            return await self._obtain_cached(artifact_type, key, params)
        except (GeneratorUnavailable, GenerationFailed) as e:
            logger.warning(
                "Serving degraded %s for %s: %s", artifact_type.value, key, e,
            )
            return degraded_artifact(artifact_type, params)

    async def _obtain_cached(
        self, artifact_type: ArtifactType, key: str, params: Mapping[str, Any],
    ) -> Artifact:
        cache_usable = True
        try:
            entry = await self._store.get(key)
        except StoreUnavailable as e:
            logger.error("Cache lookup failed for %s, serving uncached: %s", key, e)
            entry = None
            cache_usable = False

        if entry is not None:
            artifact = self._decode(entry)
            if artifact is not None:
                try:
                    await self._store.record_hit(key)
                except StoreUnavailable as e:
                    logger.error("Could not record cache hit for %s: %s", key, e)
                logger.info("Cache HIT for %s", key)
                return artifact
            # Entries are write-once: an unreadable one cannot be replaced
            # until it expires, so serve a fresh result without caching.
            cache_usable = False

        logger.info("Cache MISS for %s", key)
        if not cache_usable:
            return await self._generate(artifact_type, params)
        return await self._fill_shielded(artifact_type, key, params)

    async def _fill_shielded(
        self, artifact_type: ArtifactType, key: str, params: Mapping[str, Any],
    ) -> Artifact:
        task = self._inflight.get(key) if self._single_flight else None
        if task is None:
            task = asyncio.get_running_loop().create_task(
                self._fill(artifact_type, key, dict(params)),
                name=f"careerpath-fill:{key}",
            )
            self._track(task, key)
        else:
            logger.debug("Joining in-flight fill for %s", key)
        return await asyncio.shield(task)

    def _track(self, task: asyncio.Task[Artifact], key: str) -> None:
        self._background.add(task)
        if self._single_flight:
            self._inflight[key] = task

        def _done(t: asyncio.Task[Artifact]) -> None:
            self._background.discard(t)
            if self._inflight.get(key) is t:
                del self._inflight[key]
            # Mark the outcome retrieved even if every awaiting caller was cancelled
            if not t.cancelled():
                t.exception()

        task.add_done_callback(_done)

    async def _fill(
        self, artifact_type: ArtifactType, key: str, params: Mapping[str, Any],
    ) -> Artifact:
        artifact = await self._generate(artifact_type, params)
        document = artifact.to_document()
        ttl = self._policy.ttl_for(artifact_type)
        metadata = CacheMetadata(
            domain=params.get("domain"),
            career_id=params.get("career_id"),
            schema_version=self._schema_version,
        )

        try:
            await self._store.put(key, artifact_type, document, metadata, ttl)
        except DuplicateKey:
            logger.info("Lost fill race for %s, serving the stored entry", key)
            winner = await self._reread(key)
            if winner is not None:
                return winner
        except StoreUnavailable as e:
            logger.error("Cache write failed for %s, result not cached: %s", key, e)
        else:
            logger.info("Cached %s (ttl=%s)", key, ttl)

        return validate_payload(artifact_type, document)

    async def _reread(self, key: str) -> Artifact | None:
        try:
            entry = await self._store.get(key)
        except StoreUnavailable as e:
            logger.error("Re-read after lost race failed for %s: %s", key, e)
            return None
        return None if entry is None else self._decode(entry)

    def _decode(self, entry: CacheEntry) -> Artifact | None:
        try:
            return validate_payload(entry.artifact_type, entry.payload)
        except ValidationError as e:
            logger.warning("Cached payload for %s failed validation: %s", entry.key, e)
            return None

    async def _generate(
        self, artifact_type: ArtifactType, params: Mapping[str, Any],
    ) -> Artifact:
        return await with_retry(
            self._generator.generate,
            artifact_type,
            params,
            policy=self._retry_policy,
            label=f"{artifact_type.value} generation",
        )

    # --- Typed entry points ---

    async def obtain_roadmap(
        self, career_id: str, domain: str, career_name: str,
    ) -> RoadmapArtifact:
        """Roadmap for a career; degraded (``error`` set) instead of raising."""
        artifact = await self.obtain(
            ArtifactType.ROADMAP,
            {"career_id": career_id, "domain": domain, "career_name": career_name},
        )
        return cast(RoadmapArtifact, artifact)

    async def obtain_topic_resources(self, topic_name: str, domain: str) -> list[Resource]:
        """Free resources for a topic; empty list on failure."""
        artifact = await self.obtain(
            ArtifactType.TOPIC_RESOURCES, {"topic_name": topic_name, "domain": domain},
        )
        return cast(TopicResourcesArtifact, artifact).resources

    async def obtain_career_recommendations(
        self, profile: AssessmentProfile | Mapping[str, Any],
    ) -> list[CareerRecommendation]:
        """Personalized recommendations. Never cached; failures propagate.

        Raises:
            GeneratorUnavailable: No AI client configured.
            GenerationFailed: The AI call or its parsing failed.
        """
        profile = AssessmentProfile.model_validate(profile)
        artifact = await self.obtain(
            ArtifactType.CAREER_RECOMMENDATION, {"profile": profile},
        )
        return cast(CareerRecommendationSet, artifact).recommendations

    async def get_cache_stats(self) -> dict[str, TypeStats]:
        """Per-artifact-type entry count and total hits.

        Raises:
            StoreUnavailable: If the store cannot be queried.
        """
        stats = await self._store.stats()
        return {artifact_type.value: value for artifact_type, value in stats.items()}

    async def aclose(self) -> None:
        """Wait for in-flight fills so their results still reach the cache."""
        pending = list(self._background)
        if pending:
            logger.debug("Waiting for %d in-flight fills", len(pending))
            await asyncio.gather(*pending, return_exceptions=True)
