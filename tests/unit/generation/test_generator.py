# tests/unit/generation/test_generator.py — v1
"""Tests for generation/generator.py — AI call, parsing, coercion and error mapping."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from careerpath.core.errors import GenerationFailed, GeneratorUnavailable, PayloadParseError
from careerpath.core.models import (
    ArtifactType,
    CareerRecommendationSet,
    RoadmapArtifact,
    TopicResourcesArtifact,
)
from careerpath.generation.generator import ContentGenerator, coerce_artifact
from careerpath.generation.prompts import SYSTEM_PROMPT
from careerpath.storage.models import RoadmapRecord
from careerpath.storage.sqlite_repository import SqliteRoadmapRepository

ROADMAP_PARAMS = {"career_id": "data-scientist", "domain": "technology", "career_name": "Data Scientist"}
TOPIC_PARAMS = {"topic_name": "Linear Regression", "domain": "technology"}
NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


class TestGenerate:
    @pytest.mark.asyncio
    async def test_unavailable_without_client(self):
        generator = ContentGenerator(None)
        assert not generator.available
        with pytest.raises(GeneratorUnavailable):
            await generator.generate(ArtifactType.ROADMAP, ROADMAP_PARAMS)

    @pytest.mark.asyncio
    async def test_roadmap(self, make_client, roadmap_json):
        client = make_client(roadmap_json)
        roadmap = await ContentGenerator(client).generate(ArtifactType.ROADMAP, ROADMAP_PARAMS)
        assert isinstance(roadmap, RoadmapArtifact)
        assert roadmap.career_id == "data-scientist"
        assert roadmap.roadmap_id == "data-scientist_roadmap"
        assert roadmap.career_name == "Data Scientist"
        assert roadmap.target_duration == 16
        assert [m.module_id for m in roadmap.modules] == ["mod_1", "mod_2"]
        assert roadmap.modules[1].estimated_hours == 14
        assert not roadmap.is_degraded
        assert client.call_count == 1

    @pytest.mark.asyncio
    async def test_prompt_and_system_sent(self, make_client, roadmap_json):
        client = make_client(roadmap_json)
        await ContentGenerator(client).generate(ArtifactType.ROADMAP, ROADMAP_PARAMS)
        prompt = client.calls[0][0].content
        assert "Data Scientist" in prompt
        assert "technology" in prompt
        assert client.systems[0] == SYSTEM_PROMPT
        assert client.json_flags == [True]

    @pytest.mark.asyncio
    async def test_topic_resources(self, make_client, resources_json):
        client = make_client(f"```json\n{resources_json}\n```")
        artifact = await ContentGenerator(client).generate(ArtifactType.TOPIC_RESOURCES, TOPIC_PARAMS)
        assert isinstance(artifact, TopicResourcesArtifact)
        assert artifact.topic_name == "Linear Regression"
        assert len(artifact.resources) == 2
        assert artifact.resources[1].type == "article"
        assert artifact.resources[1].is_free is True

    @pytest.mark.asyncio
    async def test_recommendations(self, make_client, recommendations_json, assessment_profile):
        client = make_client(recommendations_json)
        artifact = await ContentGenerator(client).generate(
            ArtifactType.CAREER_RECOMMENDATION, {"profile": assessment_profile},
        )
        assert isinstance(artifact, CareerRecommendationSet)
        assert [r.id for r in artifact.recommendations] == ["data-scientist", "ux-designer"]
        assert artifact.recommendations[0].fit_score == 87
        assert artifact.recommendations[1].fit_score == 71

    @pytest.mark.asyncio
    async def test_provider_error_becomes_generation_failed(self, make_client):
        client = make_client(ConnectionError("quota exceeded"))
        with pytest.raises(GenerationFailed, match="quota exceeded") as exc_info:
            await ContentGenerator(client).generate(ArtifactType.ROADMAP, ROADMAP_PARAMS)
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_timeout(self, make_client, roadmap_json):
        client = make_client(roadmap_json, delay_s=1.0)
        generator = ContentGenerator(client, timeout_s=0.05)
        with pytest.raises(GenerationFailed, match="timed out"):
            await generator.generate(ArtifactType.ROADMAP, ROADMAP_PARAMS)

    @pytest.mark.asyncio
    async def test_unparseable_output(self, make_client):
        client = make_client("I cannot produce a roadmap right now.")
        with pytest.raises(PayloadParseError):
            await ContentGenerator(client).generate(ArtifactType.ROADMAP, ROADMAP_PARAMS)

    @pytest.mark.asyncio
    async def test_wrong_shape(self, make_client):
        client = make_client('{"unexpected": true}')
        with pytest.raises(GenerationFailed, match="expected shape"):
            await ContentGenerator(client).generate(ArtifactType.TOPIC_RESOURCES, TOPIC_PARAMS)

    @pytest.mark.asyncio
    async def test_invalid_resource(self, make_client):
        client = make_client(json.dumps({"resources": [{"url": "https://no-title"}]}))
        with pytest.raises(GenerationFailed):
            await ContentGenerator(client).generate(ArtifactType.TOPIC_RESOURCES, TOPIC_PARAMS)

    @pytest.mark.asyncio
    async def test_single_call_per_generate(self, make_client):
        client = make_client(RuntimeError("boom"))
        with pytest.raises(GenerationFailed):
            await ContentGenerator(client).generate(ArtifactType.ROADMAP, ROADMAP_PARAMS)
        assert client.call_count == 1


class TestCoerceArtifact:
    def test_identity_comes_from_request(self, roadmap_document):
        doc = {**roadmap_document, "careerId": "hallucinated", "domain": "arts"}
        roadmap = coerce_artifact(ArtifactType.ROADMAP, doc, ROADMAP_PARAMS)
        assert roadmap.career_id == "data-scientist"
        assert roadmap.domain == "technology"

    def test_wrapped_roadmap(self, roadmap_document):
        roadmap = coerce_artifact(ArtifactType.ROADMAP, {"roadmap": roadmap_document}, ROADMAP_PARAMS)
        assert len(roadmap.modules) == 2

    def test_model_error_field_dropped(self, roadmap_document):
        doc = {**roadmap_document, "error": "model said something"}
        roadmap = coerce_artifact(ArtifactType.ROADMAP, doc, ROADMAP_PARAMS)
        assert not roadmap.is_degraded

    def test_model_roadmap_id_replaced(self, roadmap_document):
        doc = {**roadmap_document, "roadmapId": "roadmap-1", "roadmap_id": "roadmap-1"}
        roadmap = coerce_artifact(ArtifactType.ROADMAP, doc, ROADMAP_PARAMS)
        assert roadmap.roadmap_id == "data-scientist_roadmap"

    @pytest.mark.asyncio
    async def test_repeated_model_id_persists_per_career(self, roadmap_document, tmp_path):
        doc = {**roadmap_document, "roadmapId": "roadmap-1"}
        web_params = {"career_id": "web-dev", "domain": "technology", "career_name": "Web Developer"}
        repo = SqliteRoadmapRepository(db_path=tmp_path / "roadmaps.db")
        try:
            for params in (ROADMAP_PARAMS, web_params):
                roadmap = coerce_artifact(ArtifactType.ROADMAP, doc, params)
                await repo.insert(
                    RoadmapRecord(**roadmap.model_dump(), generated_at=NOW, last_updated=NOW)
                )
            found = await repo.find_by_career_id("web-dev")
            assert found is not None
            assert found.roadmap_id == "web-dev_roadmap"
        finally:
            repo.close()

    def test_roadmap_must_be_object(self):
        with pytest.raises(TypeError):
            coerce_artifact(ArtifactType.ROADMAP, [1, 2], ROADMAP_PARAMS)

    def test_bare_resource_list(self, resources_document):
        artifact = coerce_artifact(
            ArtifactType.TOPIC_RESOURCES, resources_document["resources"], TOPIC_PARAMS,
        )
        assert len(artifact.resources) == 2

    def test_recommendations_key(self):
        artifact = coerce_artifact(
            ArtifactType.CAREER_RECOMMENDATION,
            {"recommendations": [{"id": "a", "name": "A"}]},
            {},
        )
        assert artifact.recommendations[0].name == "A"
