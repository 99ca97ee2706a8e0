# src/cache/keys.py — v1
"""Deterministic cache-key derivation from a semantic request.

Key form: ``<artifact_type>:v<schema_version>:<component>[:<component>...]``.
Components are percent-quoted, so a ``:`` inside a parameter cannot make two
different requests collide. Bumping the schema version makes every older
entry unreachable without deleting it.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from careerpath.core.errors import UncacheableArtifact
from careerpath.core.models import ArtifactType

CACHE_SCHEMA_VERSION = 1

_WHITESPACE = re.compile(r"\s+")


def normalize_topic_name(name: str) -> str:
    """Case-fold and collapse whitespace runs to a single underscore."""
    return _WHITESPACE.sub("_", name.strip().casefold())


def derive_key(
    artifact_type: ArtifactType | str,
    params: Mapping[str, Any],
    schema_version: int = CACHE_SCHEMA_VERSION,
) -> str:
    """Map ``(artifact_type, params)`` to a stable cache key.

    Roadmaps are keyed by ``career_id`` alone: domain and career name are
    generation inputs, not identity. Topic resources are keyed by the
    normalized topic name plus the domain.

    Raises:
        UncacheableArtifact: For career recommendations, which are never stored.
        KeyError: If a required parameter is missing.
    """
    artifact_type = ArtifactType(artifact_type)

    if artifact_type is ArtifactType.ROADMAP:
        components = [str(params["career_id"]).strip()]
    elif artifact_type is ArtifactType.TOPIC_RESOURCES:
        components = [
            normalize_topic_name(str(params["topic_name"])),
            str(params["domain"]).strip().casefold(),
        ]
    else:
        raise UncacheableArtifact(
            f"{artifact_type.value} artifacts are personalized and never cached"
        )

    quoted = ":".join(quote(c, safe="") for c in components)
    return f"{artifact_type.value}:v{schema_version}:{quoted}"
