# src/storage/sqlite_repository.py — v1
"""SQLite roadmap repository (ROADMAP_STORE_BACKEND=sqlite, the default).

The full roadmap is stored as its camelCase JSON document; ``career_id`` is
the primary key, so concurrent first inserts resolve to a single winner.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from careerpath.core.errors import StoreUnavailable
from careerpath.storage.base_roadmap_repository import BaseRoadmapRepository, DuplicateRoadmap
from careerpath.storage.models import RoadmapRecord

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS roadmaps (
    career_id TEXT PRIMARY KEY,
    roadmap_id TEXT NOT NULL UNIQUE,
    domain TEXT NOT NULL,
    document TEXT NOT NULL,
    generated_at TEXT NOT NULL,
    last_updated TEXT NOT NULL,
    version INTEGER NOT NULL DEFAULT 1
);
CREATE INDEX IF NOT EXISTS idx_roadmaps_domain ON roadmaps(domain);
"""


class SqliteRoadmapRepository(BaseRoadmapRepository):
    def __init__(self, db_path: Path | str, timeout_s: float = 5.0) -> None:
        self._db_path = Path(db_path).expanduser()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self._db_path), timeout=timeout_s)
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.executescript(_SCHEMA)
        except (OSError, sqlite3.Error) as e:
            raise StoreUnavailable(f"Cannot open roadmap database {self._db_path}: {e}") from e

    async def find_by_career_id(self, career_id: str) -> RoadmapRecord | None:
        try:
            row = self._conn.execute(
                "SELECT document FROM roadmaps WHERE career_id = ?", (career_id,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Roadmap lookup failed: {e}") from e
        if row is None:
            return None
        return RoadmapRecord.model_validate_json(row[0])

    async def insert(self, record: RoadmapRecord) -> RoadmapRecord:
        try:
            with self._conn:
                self._conn.execute(
                    """INSERT INTO roadmaps
                       (career_id, roadmap_id, domain, document, generated_at, last_updated, version)
                       VALUES (?, ?, ?, ?, ?, ?, ?)""",
                    (
                        record.career_id,
                        record.roadmap_id,
                        record.domain,
                        record.model_dump_json(by_alias=True),
                        record.generated_at.isoformat(),
                        record.last_updated.isoformat(),
                        record.version,
                    ),
                )
        except sqlite3.IntegrityError as e:
            raise DuplicateRoadmap(record.career_id) from e
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Roadmap insert failed: {e}") from e
        logger.debug("Persisted roadmap %s", record.roadmap_id)
        return record

    def close(self) -> None:
        self._conn.close()
