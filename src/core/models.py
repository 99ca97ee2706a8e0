# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

Generated artifacts form a tagged union keyed by ArtifactType. Field names are
snake_case in Python and camelCase on the wire, so model output written in the
frontend's JSON shape validates directly and round-trips unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ArtifactType(str, Enum):
    """Kinds of AI-generated content the service knows how to produce."""

    ROADMAP = "roadmap"
    CAREER_RECOMMENDATION = "career_recommendation"
    TOPIC_RESOURCES = "topic_resources"


class WireModel(BaseModel):
    """Base for payload models: camelCase aliases, unknown fields ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_document(self) -> dict[str, Any]:
        """Serialize to the JSON-compatible document stored in the cache."""
        return self.model_dump(mode="json", by_alias=True)


# === LEARNING CONTENT ===


class Resource(WireModel):
    """A single free learning resource (video, article, practice platform...)."""

    type: str = "article"
    platform: str = ""
    title: str
    url: str = ""
    is_free: bool = True
    duration: str | None = None
    instructor: str | None = None
    rating: float | None = None
    language: str | None = None
    certification: bool = False
    thumbnail: str | None = None
    priority: int = 0


class PracticeResource(WireModel):
    platform: str
    difficulty: str = ""
    problem_set: list[str] = Field(default_factory=list)


class AssessmentQuiz(WireModel):
    questions: int
    passing_score: int


class Topic(WireModel):
    """One topic inside a roadmap module."""

    topic_id: str
    title: str
    description: str = ""
    learning_objectives: list[str] = Field(default_factory=list)
    estimated_hours: float = 0
    resources: list[Resource] = Field(default_factory=list)
    practice_resources: list[PracticeResource] = Field(default_factory=list)
    assessment_quiz: AssessmentQuiz | None = None


class Module(WireModel):
    """A roadmap module: an ordered group of topics."""

    module_id: str
    title: str
    description: str = ""
    estimated_hours: float | None = None
    prerequisite_modules: list[str] = Field(default_factory=list)
    topics: list[Topic] = Field(default_factory=list)

    @model_validator(mode="after")
    def _default_hours_from_topics(self) -> Module:
        if self.estimated_hours is None:
            self.estimated_hours = sum(t.estimated_hours for t in self.topics)
        return self


class CapstoneProject(WireModel):
    title: str
    description: str = ""
    estimated_hours: float = 0
    required_skills: list[str] = Field(default_factory=list)
    github_template: str | None = None


# === ARTIFACTS ===


class RoadmapArtifact(WireModel):
    """Career learning roadmap, shared by every user on the same career.

    ``error`` is set only on degraded placeholders produced when generation
    fails; such roadmaps carry an empty module list.
    """

    roadmap_id: str
    career_id: str
    domain: str
    career_name: str = ""
    target_duration: int = 12  # weeks
    difficulty_level: Literal["beginner", "intermediate", "advanced"] | None = None
    prerequisite_skills: list[str] = Field(default_factory=list)
    modules: list[Module] = Field(default_factory=list)
    capstone_projects: list[CapstoneProject] = Field(default_factory=list)
    error: str | None = None

    @property
    def is_degraded(self) -> bool:
        return self.error is not None

    @property
    def total_hours(self) -> float:
        return sum(m.estimated_hours or 0 for m in self.modules)


class TopicResourcesArtifact(WireModel):
    """Curated free resources for a topic within a domain."""

    topic_name: str
    domain: str
    resources: list[Resource] = Field(default_factory=list)
    error: str | None = None

    @property
    def is_degraded(self) -> bool:
        return self.error is not None


class AptitudeScores(WireModel):
    logical: int = 0
    creative: int = 0
    analytical: int = 0
    communication: int = 0


class AssessmentProfile(WireModel):
    """A user's assessment answers: input to personalized recommendations."""

    education: str
    interests: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    goals: str = ""
    aptitude_scores: AptitudeScores | None = None
    learning_style: str | None = None
    daily_hours: float | None = None


class CareerRecommendation(WireModel):
    """One recommended career with its fit score and market context."""

    id: str
    name: str
    domain: str | None = None
    description: str = ""
    fit_score: float = 0
    skills: list[str] = Field(default_factory=list)
    avg_salary: str | None = None
    demand: str | None = None
    time_to_learn: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_fit_score(cls, data: Any) -> Any:
        # Models sometimes return {"fitScore": {"overall": 82, "breakdown": {...}}}
        if isinstance(data, dict):
            score = data.get("fitScore", data.get("fit_score"))
            if isinstance(score, dict) and "overall" in score:
                data = {**data, "fitScore": score["overall"]}
                data.pop("fit_score", None)
        return data


class CareerRecommendationSet(WireModel):
    recommendations: list[CareerRecommendation] = Field(default_factory=list)


Artifact = RoadmapArtifact | TopicResourcesArtifact | CareerRecommendationSet

ARTIFACT_MODELS: dict[ArtifactType, type[WireModel]] = {
    ArtifactType.ROADMAP: RoadmapArtifact,
    ArtifactType.TOPIC_RESOURCES: TopicResourcesArtifact,
    ArtifactType.CAREER_RECOMMENDATION: CareerRecommendationSet,
}


def validate_payload(artifact_type: ArtifactType, document: Any) -> Artifact:
    """Turn a stored JSON document back into its typed artifact.

    Raises:
        pydantic.ValidationError: If the document does not match the variant.
    """
    model = ARTIFACT_MODELS[ArtifactType(artifact_type)]
    return model.model_validate(document)  # type: ignore[return-value]
