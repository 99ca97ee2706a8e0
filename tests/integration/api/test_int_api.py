# tests/integration/api/test_int_api.py — v2
"""Integration tests for the public facade on file-backed backends.

Coverage targets: facade.py, roadmap_service.py, sqlite_repository.py
"""

from __future__ import annotations

import pytest

from careerpath.api.facade import build_app


class TestAppLifecycle:

    @pytest.mark.asyncio
    async def test_roadmap_survives_restart(self, sqlite_settings, make_client, roadmap_json):
        client = make_client(roadmap_json)
        async with build_app(sqlite_settings, client=client) as app:
            roadmap = await app.obtain_roadmap("data-scientist", "technology", "Data Scientist")
            assert not roadmap.is_degraded

        # A restarted app without AI still serves the persisted roadmap
        async with build_app(sqlite_settings) as app:
            again = await app.obtain_roadmap("data-scientist", "technology", "Data Scientist")
            assert again == roadmap
        assert client.call_count == 1

    @pytest.mark.asyncio
    async def test_resources_cached_across_restart(self, sqlite_settings, make_client,
                                                   resources_json):
        async with build_app(sqlite_settings, client=make_client(resources_json)) as app:
            first = await app.obtain_topic_resources("Linear Regression", "technology")

        async with build_app(sqlite_settings) as app:
            second = await app.obtain_topic_resources("Linear Regression", "technology")
            stats = await app.get_cache_stats()
        assert second == first
        assert stats["topic_resources"].total_hits == 1

    @pytest.mark.asyncio
    async def test_degraded_roadmap_not_persisted(self, sqlite_settings, make_client,
                                                  roadmap_json):
        async with build_app(sqlite_settings) as app:
            degraded = await app.obtain_roadmap("data-scientist", "technology", "Data Scientist")
            assert degraded.is_degraded
            assert await app.repository.find_by_career_id("data-scientist") is None

        async with build_app(sqlite_settings, client=make_client(roadmap_json)) as app:
            roadmap = await app.obtain_roadmap("data-scientist", "technology", "Data Scientist")
            assert not roadmap.is_degraded
