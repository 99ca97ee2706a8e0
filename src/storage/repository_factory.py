# src/storage/repository_factory.py — v1
"""Factory: instantiate the roadmap repository from configuration."""

from __future__ import annotations

from careerpath.config.settings import Settings
from careerpath.storage.base_roadmap_repository import BaseRoadmapRepository


def create_roadmap_repository(settings: Settings) -> BaseRoadmapRepository:
    """Create the repository selected by ROADMAP_STORE_BACKEND.

    Raises:
        ValueError: If the backend is not supported.
    """
    if settings.roadmap_store_backend == "memory":
        from careerpath.storage.memory_repository import MemoryRoadmapRepository
        return MemoryRoadmapRepository()

    if settings.roadmap_store_backend == "sqlite":
        from careerpath.storage.sqlite_repository import SqliteRoadmapRepository
        return SqliteRoadmapRepository(db_path=settings.roadmap_db_path)

    raise ValueError(f"Unsupported roadmap store backend: {settings.roadmap_store_backend!r}")
