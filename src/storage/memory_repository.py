# src/storage/memory_repository.py — v1
"""In-process roadmap repository (ROADMAP_STORE_BACKEND=memory)."""

from __future__ import annotations

import asyncio

from careerpath.storage.base_roadmap_repository import BaseRoadmapRepository, DuplicateRoadmap
from careerpath.storage.models import RoadmapRecord


class MemoryRoadmapRepository(BaseRoadmapRepository):
    def __init__(self) -> None:
        self._records: dict[str, RoadmapRecord] = {}
        self._lock = asyncio.Lock()

    async def find_by_career_id(self, career_id: str) -> RoadmapRecord | None:
        record = self._records.get(career_id)
        return None if record is None else record.model_copy(deep=True)

    async def insert(self, record: RoadmapRecord) -> RoadmapRecord:
        async with self._lock:
            if record.career_id in self._records:
                raise DuplicateRoadmap(record.career_id)
            self._records[record.career_id] = record.model_copy(deep=True)
        return record
