# src/cache/sqlite_store.py — v2
"""SQLite-based cache store (CACHE_BACKEND=sqlite, the default).

Uses stdlib sqlite3, no external dependency. The PRIMARY KEY on ``key``
gives atomic first-writer-wins across processes sharing the file, and hits
are counted with a single UPDATE so concurrent increments are never lost.
Timestamps are stored as UTC epoch seconds.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from careerpath.cache.base_cache_store import BaseCacheStore, Clock
from careerpath.cache.models import CacheEntry, CacheMetadata, TypeStats
from careerpath.core.errors import DuplicateKey, StoreUnavailable
from careerpath.core.models import ArtifactType

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cache_entries (
    key TEXT PRIMARY KEY,
    artifact_type TEXT NOT NULL,
    payload TEXT NOT NULL,
    metadata TEXT NOT NULL,
    hit_count INTEGER NOT NULL DEFAULT 0,
    created_at REAL NOT NULL,
    expires_at REAL
);
CREATE INDEX IF NOT EXISTS idx_type_expires ON cache_entries(artifact_type, expires_at);
CREATE INDEX IF NOT EXISTS idx_expires ON cache_entries(expires_at);
"""

_LIVE = "(expires_at IS NULL OR expires_at > ?)"


def _ts(value: datetime | None) -> float | None:
    return None if value is None else value.timestamp()


def _dt(value: float | None) -> datetime | None:
    return None if value is None else datetime.fromtimestamp(value, tz=timezone.utc)


class SqliteCacheStore(BaseCacheStore):
    """SQLite-backed cache store."""

    def __init__(
        self, db_path: Path | str, clock: Clock | None = None, timeout_s: float = 5.0,
    ) -> None:
        super().__init__(clock)
        self._db_path = Path(db_path).expanduser()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            # Autocommit; put() manages its own transaction.
            self._conn = sqlite3.connect(
                str(self._db_path), timeout=timeout_s, isolation_level=None,
            )
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.executescript(_SCHEMA)
        except (OSError, sqlite3.Error) as e:
            raise StoreUnavailable(f"Cannot open cache database {self._db_path}: {e}") from e

    @contextmanager
    def _guard(self, key: str | None = None) -> Iterator[None]:
        """Translate driver errors into the store error taxonomy."""
        try:
            yield
        except sqlite3.IntegrityError as e:
            raise DuplicateKey(key or "") from e
        except sqlite3.Error as e:
            raise StoreUnavailable(f"SQLite cache error: {e}") from e

    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve a live entry by key."""
        with self._guard():
            row = self._conn.execute(
                "SELECT key, artifact_type, payload, metadata, hit_count, created_at, expires_at "
                f"FROM cache_entries WHERE key = ? AND {_LIVE}",
                (key, _ts(self._now())),
            ).fetchone()
        if row is None:
            return None
        return CacheEntry(
            key=row[0],
            artifact_type=ArtifactType(row[1]),
            payload=json.loads(row[2]),
            metadata=CacheMetadata.model_validate_json(row[3]),
            hit_count=row[4],
            created_at=_dt(row[5]),
            expires_at=_dt(row[6]),
        )

    async def put(
        self,
        key: str,
        artifact_type: ArtifactType,
        payload: Any,
        metadata: CacheMetadata | None = None,
        ttl: timedelta | None = None,
    ) -> CacheEntry:
        """Insert a new entry; an expired row under the same key is replaced."""
        now = self._now()
        entry = CacheEntry(
            key=key,
            artifact_type=artifact_type,
            payload=payload,
            metadata=metadata or CacheMetadata(),
            created_at=now,
            expires_at=self._expiry(ttl, now),
        )
        with self._guard(key):
            self._conn.execute("BEGIN IMMEDIATE")
            try:
                self._conn.execute(
                    "DELETE FROM cache_entries "
                    "WHERE key = ? AND expires_at IS NOT NULL AND expires_at <= ?",
                    (key, _ts(now)),
                )
                self._conn.execute(
                    """INSERT INTO cache_entries
                       (key, artifact_type, payload, metadata, hit_count, created_at, expires_at)
                       VALUES (?, ?, ?, ?, 0, ?, ?)""",
                    (
                        key,
                        entry.artifact_type.value,
                        json.dumps(payload, ensure_ascii=False),
                        entry.metadata.model_dump_json(),
                        _ts(entry.created_at),
                        _ts(entry.expires_at),
                    ),
                )
            except sqlite3.Error:
                self._conn.execute("ROLLBACK")
                raise
            self._conn.execute("COMMIT")
        return entry

    async def record_hit(self, key: str) -> None:
        with self._guard():
            self._conn.execute(
                f"UPDATE cache_entries SET hit_count = hit_count + 1 WHERE key = ? AND {_LIVE}",
                (key, _ts(self._now())),
            )

    async def sweep_expired(self) -> int:
        with self._guard():
            cursor = self._conn.execute(
                "DELETE FROM cache_entries WHERE expires_at IS NOT NULL AND expires_at <= ?",
                (_ts(self._now()),),
            )
        removed = max(cursor.rowcount, 0)
        if removed:
            logger.debug("Swept %d expired SQLite entries", removed)
        return removed

    async def stats(self) -> dict[ArtifactType, TypeStats]:
        with self._guard():
            rows = self._conn.execute(
                "SELECT artifact_type, COUNT(*), COALESCE(SUM(hit_count), 0) "
                f"FROM cache_entries WHERE {_LIVE} GROUP BY artifact_type",
                (_ts(self._now()),),
            ).fetchall()
        return {
            ArtifactType(row[0]): TypeStats(count=row[1], total_hits=row[2])
            for row in rows
        }

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
