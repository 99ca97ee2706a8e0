# src/generation/generator.py — v1
"""Content generator: prompt the AI, extract JSON, coerce to an artifact.

Failure mapping:
  - no client configured                          -> GeneratorUnavailable
  - provider error, timeout, unparseable output,
    or output that does not fit the artifact shape -> GenerationFailed

The generator makes exactly one AI call per generate(); retries are the
orchestrator's decision.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from careerpath.core.errors import GenerationFailed, GeneratorUnavailable
from careerpath.core.models import (
    Artifact,
    ArtifactType,
    CareerRecommendationSet,
    RoadmapArtifact,
    TopicResourcesArtifact,
)
from careerpath.generation.extraction import parse_json_payload
from careerpath.generation.prompts import SYSTEM_PROMPT, build_prompt
from careerpath.llm.base_client import BaseLLMClient
from careerpath.llm.models import Message

logger = logging.getLogger(__name__)


class ContentGenerator:
    """Wraps a BaseLLMClient with prompting, a timeout and response parsing."""

    def __init__(
        self,
        client: BaseLLMClient | None,
        timeout_s: float = 60.0,
        max_tokens: int = 8192,
        temperature: float = 0.4,
    ) -> None:
        self._client = client
        self._timeout_s = timeout_s
        self._max_tokens = max_tokens
        self._temperature = temperature

    @property
    def available(self) -> bool:
        return self._client is not None

    async def generate(
        self, artifact_type: ArtifactType, params: Mapping[str, Any],
    ) -> Artifact:
        """Produce a validated artifact for a cache miss."""
        if self._client is None:
            raise GeneratorUnavailable("AI generation is not configured (no API key)")

        artifact_type = ArtifactType(artifact_type)
        prompt = build_prompt(artifact_type, params)

        try:
            response = await asyncio.wait_for(
                self._client.complete(
                    messages=[Message(role="user", content=prompt)],
                    system=SYSTEM_PROMPT,
                    max_tokens=self._max_tokens,
                    temperature=self._temperature,
                    expect_json=True,
                ),
                timeout=self._timeout_s,
            )
        except asyncio.TimeoutError as e:
            raise GenerationFailed(
                f"{artifact_type.value} generation timed out after {self._timeout_s:.0f}s"
            ) from e
        except Exception as e:
            raise GenerationFailed(f"{artifact_type.value} generation failed: {e}") from e

        logger.debug(
            "Generated %s with %s/%s in %dms (%d+%d tokens)",
            artifact_type.value, response.provider, response.model,
            response.latency_ms, response.input_tokens, response.output_tokens,
        )

        document = parse_json_payload(response.content)
        try:
            return coerce_artifact(artifact_type, document, params)
        except (ValidationError, TypeError, ValueError) as e:
            raise GenerationFailed(
                f"{artifact_type.value} response does not match the expected shape: {e}"
            ) from e


_ROADMAP_IDENTITY_FIELDS = frozenset(
    {"error", "roadmap_id", "career_id", "career_name"}
)


def coerce_artifact(
    artifact_type: ArtifactType, document: Any, params: Mapping[str, Any],
) -> Artifact:
    """Fit a parsed JSON document to the artifact model for ``artifact_type``.

    Identity fields always come from the request, not from the model.
    """
    if artifact_type is ArtifactType.ROADMAP:
        if isinstance(document, dict) and isinstance(document.get("roadmap"), dict):
            document = document["roadmap"]
        if not isinstance(document, dict):
            raise TypeError(f"expected a JSON object, got {type(document).__name__}")
        career_id = str(params["career_id"])
        data = {k: v for k, v in document.items() if k not in _ROADMAP_IDENTITY_FIELDS}
        data.update(
            roadmapId=f"{career_id}_roadmap",
            careerId=career_id,
            domain=params.get("domain") or data.get("domain") or "general",
            careerName=params.get("career_name") or data.get("careerName") or career_id,
        )
        return RoadmapArtifact.model_validate(data)

    if artifact_type is ArtifactType.TOPIC_RESOURCES:
        resources = _unwrap_list(document, ("resources",))
        return TopicResourcesArtifact.model_validate(
            {
                "topicName": params["topic_name"],
                "domain": params.get("domain") or "general",
                "resources": resources,
            }
        )

    recommendations = _unwrap_list(document, ("careers", "recommendations"))
    return CareerRecommendationSet.model_validate({"recommendations": recommendations})


def _unwrap_list(document: Any, keys: tuple[str, ...]) -> list[Any]:
    if isinstance(document, list):
        return document
    if isinstance(document, dict):
        for key in keys:
            if isinstance(document.get(key), list):
                return document[key]
    raise TypeError(f"expected a JSON array or an object with one of {keys}")
