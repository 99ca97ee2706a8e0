# tests/integration/conftest.py — v2
"""Integration fixtures: file-backed apps and optional external Redis.

Redis tests run only when CAREERPATH_TEST_REDIS_URL points at a server.
"""

from __future__ import annotations

import os

import pytest

from careerpath.config.settings import Settings

REDIS_URL = os.environ.get("CAREERPATH_TEST_REDIS_URL", "")


@pytest.fixture
def sqlite_settings(tmp_path):
    """Settings with both cache and roadmap records on SQLite under tmp_path."""
    return Settings(
        _env_file=None,
        cache_backend="sqlite",
        cache_root=tmp_path / "cache",
        roadmap_store_backend="sqlite",
        roadmap_db_path=tmp_path / "roadmaps.db",
        google_api_key="",
        generation_max_retries=0,
    )


@pytest.fixture
def redis_url():
    if not REDIS_URL:
        pytest.skip("CAREERPATH_TEST_REDIS_URL not set")
    return REDIS_URL
