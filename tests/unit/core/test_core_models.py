# tests/unit/core/test_core_models.py — v1
"""Tests for core/models.py — artifact payload models and the wire format."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from careerpath.core.models import (
    ARTIFACT_MODELS,
    ArtifactType,
    AssessmentProfile,
    CareerRecommendation,
    CareerRecommendationSet,
    Module,
    Resource,
    RoadmapArtifact,
    TopicResourcesArtifact,
    validate_payload,
)


class TestArtifactType:
    def test_values(self):
        assert {t.value for t in ArtifactType} == {
            "roadmap", "career_recommendation", "topic_resources",
        }

    def test_every_type_has_model(self):
        assert set(ARTIFACT_MODELS) == set(ArtifactType)


class TestWireFormat:
    def test_camel_case_input(self, roadmap_document):
        doc = {**roadmap_document, "roadmapId": "r", "careerId": "c", "domain": "d"}
        roadmap = RoadmapArtifact.model_validate(doc)
        assert roadmap.target_duration == 16
        assert roadmap.prerequisite_skills == ["Basic maths", "Spreadsheets"]

    def test_snake_case_input(self):
        roadmap = RoadmapArtifact(roadmap_id="r", career_id="c", domain="d")
        assert roadmap.career_id == "c"

    def test_document_is_camel_case(self):
        doc = RoadmapArtifact(roadmap_id="r", career_id="c", domain="d").to_document()
        assert doc["careerId"] == "c"
        assert "career_id" not in doc

    def test_document_roundtrip_stable(self, roadmap_document):
        doc = {**roadmap_document, "roadmapId": "r", "careerId": "c", "domain": "d"}
        first = RoadmapArtifact.model_validate(doc).to_document()
        second = RoadmapArtifact.model_validate(first).to_document()
        assert first == second

    def test_unknown_fields_ignored(self):
        resource = Resource.model_validate({"title": "T", "sponsored": True})
        assert not hasattr(resource, "sponsored")


class TestRoadmap:
    def test_module_hours_default_to_topic_sum(self):
        module = Module.model_validate(
            {
                "moduleId": "m",
                "title": "M",
                "topics": [
                    {"topicId": "a", "title": "A", "estimatedHours": 2.5},
                    {"topicId": "b", "title": "B", "estimatedHours": 3},
                ],
            }
        )
        assert module.estimated_hours == 5.5

    def test_explicit_module_hours_kept(self):
        module = Module(module_id="m", title="M", estimated_hours=40)
        assert module.estimated_hours == 40

    def test_total_hours(self, roadmap_document):
        doc = {**roadmap_document, "roadmapId": "r", "careerId": "c", "domain": "d"}
        assert RoadmapArtifact.model_validate(doc).total_hours == 54

    def test_invalid_difficulty(self):
        with pytest.raises(ValidationError):
            RoadmapArtifact(roadmap_id="r", career_id="c", domain="d", difficulty_level="expert")

    def test_degraded_flag(self):
        assert RoadmapArtifact(roadmap_id="r", career_id="c", domain="d", error="x").is_degraded
        assert not TopicResourcesArtifact(topic_name="t", domain="d").is_degraded


class TestRecommendations:
    def test_fit_score_object_flattened(self):
        rec = CareerRecommendation.model_validate(
            {"id": "a", "name": "A", "fitScore": {"overall": 91, "breakdown": {}}}
        )
        assert rec.fit_score == 91

    def test_plain_fit_score(self):
        assert CareerRecommendation.model_validate({"id": "a", "name": "A", "fitScore": 64}).fit_score == 64

    def test_profile_requires_education(self):
        with pytest.raises(ValidationError):
            AssessmentProfile.model_validate({"interests": ["x"]})

    def test_profile_aptitude(self):
        profile = AssessmentProfile.model_validate(
            {"education": "B.Sc", "aptitudeScores": {"logical": 8}, "dailyHours": 2}
        )
        assert profile.aptitude_scores.logical == 8
        assert profile.daily_hours == 2


class TestValidatePayload:
    def test_dispatch_by_type(self):
        artifact = validate_payload("topic_resources", {"topicName": "SQL", "domain": "tech"})
        assert isinstance(artifact, TopicResourcesArtifact)
        artifact = validate_payload(ArtifactType.CAREER_RECOMMENDATION, {"recommendations": []})
        assert isinstance(artifact, CareerRecommendationSet)

    def test_mismatched_document(self):
        with pytest.raises(ValidationError):
            validate_payload(ArtifactType.ROADMAP, {"topicName": "SQL"})
