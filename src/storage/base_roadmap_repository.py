# src/storage/base_roadmap_repository.py — v1
"""Abstract durable store for generated roadmaps, queryable by career id."""

from __future__ import annotations

from abc import ABC, abstractmethod

from careerpath.core.errors import CareerPathError
from careerpath.storage.models import RoadmapRecord


class DuplicateRoadmap(CareerPathError):
    """A roadmap for this career id is already persisted."""

    def __init__(self, career_id: str):
        self.career_id = career_id
        super().__init__(f"Roadmap already stored for career {career_id!r}")


class BaseRoadmapRepository(ABC):
    """One roadmap per career id; insert-only."""

    @abstractmethod
    async def find_by_career_id(self, career_id: str) -> RoadmapRecord | None:
        """Return the stored roadmap, or None."""

    @abstractmethod
    async def insert(self, record: RoadmapRecord) -> RoadmapRecord:
        """Persist a roadmap.

        Raises:
            DuplicateRoadmap: If the career id already has a roadmap.
            StoreUnavailable: If the backend cannot be reached.
        """

    def close(self) -> None:
        """Release backend resources."""
