# src/api/facade.py — v2
"""Public API facade — explicitly constructed service graph.

Usage:
    from careerpath.api.facade import build_app
    async with build_app() as app:
        roadmap = await app.roadmaps.get_roadmap("data-scientist", "technology", "Data Scientist")

The app owns its store, generator and repository handles; nothing is
created at import time. Entering the context starts the expiry sweeper,
leaving it waits for in-flight cache fills and closes the backends.
"""

from __future__ import annotations

import logging
from typing import Any

from careerpath.cache.base_cache_store import BaseCacheStore
from careerpath.cache.cache_factory import create_cache_store
from careerpath.cache.models import TypeStats
from careerpath.cache.policy import TTLPolicy
from careerpath.cache.sweeper import ExpirySweeper
from careerpath.config.settings import Settings
from careerpath.core.models import AssessmentProfile, CareerRecommendation, Resource, RoadmapArtifact
from careerpath.generation.generator import ContentGenerator
from careerpath.llm.base_client import BaseLLMClient
from careerpath.llm.client_factory import create_default_client
from careerpath.llm.retry import RetryPolicy
from careerpath.service.orchestrator import CacheAsideOrchestrator
from careerpath.service.roadmap_service import RoadmapService
from careerpath.storage.base_roadmap_repository import BaseRoadmapRepository
from careerpath.storage.repository_factory import create_roadmap_repository

logger = logging.getLogger(__name__)


class CareerPathApp:
    """Composition root for the career-guidance content services."""

    def __init__(
        self,
        settings: Settings,
        store: BaseCacheStore,
        generator: ContentGenerator,
        repository: BaseRoadmapRepository,
    ) -> None:
        self.settings = settings
        self.store = store
        self.repository = repository
        self.orchestrator = CacheAsideOrchestrator(
            store=store,
            generator=generator,
            policy=TTLPolicy.from_settings(settings),
            retry_policy=RetryPolicy(
                max_retries=settings.generation_max_retries,
                base_delay_s=settings.generation_retry_base_delay_s,
            ),
            schema_version=settings.cache_schema_version,
            single_flight=settings.cache_single_flight,
        )
        self.roadmaps = RoadmapService(repository, self.orchestrator)
        self.sweeper = ExpirySweeper(store, interval_s=settings.cache_sweep_interval_s)

    async def __aenter__(self) -> CareerPathApp:
        self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def start(self) -> None:
        self.sweeper.start()

    async def aclose(self) -> None:
        await self.sweeper.stop()
        await self.orchestrator.aclose()
        self.store.close()
        self.repository.close()

    # --- Caller-facing operations ---

    async def obtain_roadmap(
        self, career_id: str, domain: str, career_name: str,
    ) -> RoadmapArtifact:
        return await self.roadmaps.get_roadmap(career_id, domain, career_name)

    async def obtain_topic_resources(self, topic_name: str, domain: str) -> list[Resource]:
        return await self.orchestrator.obtain_topic_resources(topic_name, domain)

    async def obtain_career_recommendations(
        self, profile: AssessmentProfile | dict[str, Any],
    ) -> list[CareerRecommendation]:
        return await self.orchestrator.obtain_career_recommendations(profile)

    async def get_cache_stats(self) -> dict[str, TypeStats]:
        return await self.orchestrator.get_cache_stats()


def build_app(
    settings: Settings | None = None,
    client: BaseLLMClient | None = None,
    store: BaseCacheStore | None = None,
    repository: BaseRoadmapRepository | None = None,
) -> CareerPathApp:
    """Wire an app from settings; explicit arguments override the factories.

    Args:
        settings: Global settings. Loaded from .env if None.
        client: LLM client. Built from the default provider if None; stays
            None (generation unavailable) when no API key is configured.
        store: Cache store. Built from CACHE_BACKEND if None.
        repository: Roadmap repository. Built from ROADMAP_STORE_BACKEND if None.
    """
    settings = settings or Settings()
    if client is None:
        client = create_default_client(settings)
    generator = ContentGenerator(
        client,
        timeout_s=settings.generation_timeout_s,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_default_temperature,
    )
    app = CareerPathApp(
        settings=settings,
        store=store or create_cache_store(settings),
        generator=generator,
        repository=repository or create_roadmap_repository(settings),
    )
    logger.debug(
        "Built app: cache=%s, roadmaps=%s, generator=%s",
        settings.cache_backend, settings.roadmap_store_backend,
        "on" if generator.available else "off",
    )
    return app
