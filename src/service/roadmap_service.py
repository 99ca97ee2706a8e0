# src/service/roadmap_service.py — v1
"""Roadmap reads: durable record first, cache-aside generation second.

The cache only accelerates first creation of a career's roadmap. Once a
roadmap exists it is persisted and served from the repository without
consulting the cache at all.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from careerpath.core.errors import StoreUnavailable
from careerpath.core.models import RoadmapArtifact
from careerpath.service.orchestrator import CacheAsideOrchestrator
from careerpath.storage.base_roadmap_repository import BaseRoadmapRepository, DuplicateRoadmap
from careerpath.storage.models import RoadmapRecord

logger = logging.getLogger(__name__)


class RoadmapService:
    def __init__(
        self, repository: BaseRoadmapRepository, orchestrator: CacheAsideOrchestrator,
    ) -> None:
        self._repository = repository
        self._orchestrator = orchestrator

    async def get_roadmap(
        self, career_id: str, domain: str, career_name: str,
    ) -> RoadmapArtifact:
        """Return the roadmap for a career, creating and persisting it if needed.

        Degraded roadmaps are returned to the caller but never persisted, so
        the next request retries generation. Repository outages are logged
        and the orchestrator's result is served directly.
        """
        try:
            record = await self._repository.find_by_career_id(career_id)
        except StoreUnavailable as e:
            logger.error("Roadmap repository unavailable, skipping lookup: %s", e)
            return await self._orchestrator.obtain_roadmap(career_id, domain, career_name)

        if record is not None:
            logger.info("Roadmap found in repository for %s", career_id)
            return record.to_artifact()

        logger.info("Roadmap not in repository for %s, obtaining", career_id)
        roadmap = await self._orchestrator.obtain_roadmap(career_id, domain, career_name)
        if roadmap.is_degraded:
            return roadmap

        now = datetime.now(timezone.utc)
        record = RoadmapRecord(
            **roadmap.model_dump(), generated_at=now, last_updated=now,
        )
        try:
            await self._repository.insert(record)
        except DuplicateRoadmap:
            # A concurrent request persisted first; serve what it stored
            try:
                winner = await self._repository.find_by_career_id(career_id)
            except StoreUnavailable as e:
                logger.error("Re-read after lost insert failed for %s: %s", career_id, e)
                return roadmap
            if winner is not None:
                return winner.to_artifact()
        except StoreUnavailable as e:
            logger.error("Could not persist roadmap for %s: %s", career_id, e)
        return roadmap
