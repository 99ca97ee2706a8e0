# src/generation/prompts.py — v1
"""Prompt templates (``prompts/*.txt``) and their fillers."""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

from careerpath.core.models import ArtifactType, AssessmentProfile

_PROMPT_DIR = Path(__file__).parent / "prompts"

SYSTEM_PROMPT = (
    "You are an expert career counselor and curriculum designer with deep "
    "knowledge of the Indian job market. Respond only with valid JSON."
)


@lru_cache(maxsize=None)
def load_template(artifact_type: ArtifactType) -> str:
    """Load and cache the template for an artifact type."""
    return (_PROMPT_DIR / f"{artifact_type.value}.txt").read_text(encoding="utf-8")


def build_prompt(artifact_type: ArtifactType, params: Mapping[str, Any]) -> str:
    """Fill the template for ``artifact_type`` from request parameters.

    Raises:
        KeyError: If a required parameter is missing.
    """
    template = load_template(artifact_type)

    if artifact_type is ArtifactType.ROADMAP:
        return template.format(
            career_id=params["career_id"],
            domain=params.get("domain") or "general",
            career_name=params.get("career_name") or params["career_id"],
        )

    if artifact_type is ArtifactType.TOPIC_RESOURCES:
        return template.format(
            topic_name=params["topic_name"],
            domain=params.get("domain") or "general",
        )

    profile = AssessmentProfile.model_validate(params["profile"])
    return template.format(
        education=profile.education,
        interests=", ".join(profile.interests) or "not specified",
        skills=", ".join(profile.skills) or "not specified",
        goals=profile.goals or "not specified",
        learning_style=profile.learning_style or "not specified",
        daily_hours=profile.daily_hours if profile.daily_hours is not None else "not specified",
    )
