# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides a scripted LLM client, a controllable clock, sample model outputs
and ready-wired stores. All I/O is local.
"""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from careerpath.cache.memory_store import MemoryCacheStore
from careerpath.cache.sqlite_store import SqliteCacheStore
from careerpath.generation.generator import ContentGenerator
from careerpath.llm.base_client import BaseLLMClient
from careerpath.llm.models import LLMResponse, Message
from careerpath.service.orchestrator import CacheAsideOrchestrator


# === HELPERS ===


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class ScriptedLLMClient(BaseLLMClient):
    """BaseLLMClient returning queued outputs (str) or raising queued errors.

    The last script item is repeated once the queue is exhausted.
    """

    def __init__(self, *script: str | BaseException, delay_s: float = 0.0) -> None:
        self._script = list(script) or ["{}"]
        self.delay_s = delay_s
        self.calls: list[list[Message]] = []
        self.systems: list[str | None] = []
        self.json_flags: list[bool] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
        expect_json: bool = False,
    ) -> LLMResponse:
        self.calls.append(messages)
        self.systems.append(system)
        self.json_flags.append(expect_json)
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        item = self._script.pop(0) if len(self._script) > 1 else self._script[0]
        if isinstance(item, BaseException):
            raise item
        return LLMResponse(
            content=item,
            input_tokens=120,
            output_tokens=480,
            model="scripted-model",
            provider="scripted",
            latency_ms=5,
        )

    @property
    def provider_name(self) -> str:
        return "scripted"

    @property
    def model_name(self) -> str:
        return "scripted-model"


# === FIXTURES: Sample model output ===


@pytest.fixture
def roadmap_document() -> dict[str, Any]:
    """A roadmap in the shape the model is asked to produce."""
    return {
        "targetDuration": 16,
        "difficultyLevel": "intermediate",
        "prerequisiteSkills": ["Basic maths", "Spreadsheets"],
        "modules": [
            {
                "moduleId": "mod_1",
                "title": "Python for Data",
                "description": "Core Python and pandas.",
                "estimatedHours": 40,
                "topics": [
                    {
                        "topicId": "topic_1_1",
                        "title": "Python Basics",
                        "estimatedHours": 10,
                        "learningObjectives": ["Variables", "Loops"],
                        "resources": [
                            {
                                "type": "video",
                                "platform": "youtube",
                                "title": "Python in one shot",
                                "url": "https://youtube.com/watch?v=abc",
                                "isFree": True,
                            }
                        ],
                    }
                ],
            },
            {
                "moduleId": "mod_2",
                "title": "Statistics",
                "prerequisiteModules": ["mod_1"],
                "topics": [
                    {"topicId": "topic_2_1", "title": "Distributions", "estimatedHours": 6},
                    {"topicId": "topic_2_2", "title": "Hypothesis Testing", "estimatedHours": 8},
                ],
            },
        ],
        "capstoneProjects": [
            {"title": "Sales Forecaster", "estimatedHours": 20, "requiredSkills": ["pandas"]}
        ],
    }


@pytest.fixture
def roadmap_json(roadmap_document: dict[str, Any]) -> str:
    return json.dumps(roadmap_document)


@pytest.fixture
def resources_document() -> dict[str, Any]:
    return {
        "resources": [
            {
                "type": "video",
                "platform": "youtube",
                "title": "Linear Regression Explained",
                "url": "https://youtube.com/watch?v=lr1",
                "isFree": True,
                "duration": "32 min",
                "priority": 5,
            },
            {
                "type": "article",
                "platform": "geeksforgeeks",
                "title": "Linear Regression in Python",
                "url": "https://www.geeksforgeeks.org/linear-regression-python/",
            },
        ]
    }


@pytest.fixture
def resources_json(resources_document: dict[str, Any]) -> str:
    return json.dumps(resources_document)


@pytest.fixture
def recommendations_json() -> str:
    return json.dumps(
        {
            "careers": [
                {
                    "id": "data-scientist",
                    "name": "Data Scientist",
                    "domain": "technology",
                    "fitScore": {"overall": 87, "breakdown": {"skills": 80}},
                    "skills": ["python", "statistics"],
                    "avgSalary": "8-15 LPA",
                    "demand": "high",
                },
                {
                    "id": "ux-designer",
                    "name": "UX Designer",
                    "domain": "design",
                    "fitScore": 71,
                },
            ]
        }
    )


@pytest.fixture
def assessment_profile() -> dict[str, Any]:
    return {
        "education": "B.Tech",
        "interests": ["data", "maths"],
        "skills": ["python"],
        "goals": "Work on machine learning products",
    }


# === FIXTURES: Clock and stores ===


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def memory_store(clock: FrozenClock) -> MemoryCacheStore:
    return MemoryCacheStore(clock=clock)


@pytest.fixture
def sqlite_store(tmp_path: Path, clock: FrozenClock):
    store = SqliteCacheStore(db_path=tmp_path / "cache" / "careerpath_cache.db", clock=clock)
    yield store
    store.close()


# === FIXTURES: Generation ===


@pytest.fixture
def make_client():
    """Factory for ScriptedLLMClient instances."""
    return ScriptedLLMClient


@pytest.fixture
def make_orchestrator(memory_store: MemoryCacheStore):
    """Build an orchestrator around a scripted client (memory store by default)."""

    def _make(
        *script: str | BaseException,
        store=None,
        timeout_s: float = 5.0,
        **kwargs: Any,
    ) -> tuple[CacheAsideOrchestrator, ScriptedLLMClient]:
        client = ScriptedLLMClient(*script)
        orchestrator = CacheAsideOrchestrator(
            store=store if store is not None else memory_store,
            generator=ContentGenerator(client, timeout_s=timeout_s),
            **kwargs,
        )
        return orchestrator, client

    return _make


@pytest.fixture
def tmp_cache_dir(tmp_path: Path) -> Path:
    """Temporary cache directory."""
    cache = tmp_path / "cache"
    cache.mkdir()
    return cache
