from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from vocabnote.db.schedule_store import dump_records, parse_records
from vocabnote.errors import StorageError
from vocabnote.models.schedule import ScheduleRecord

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;

CREATE TABLE IF NOT EXISTS study_schedule (
    filename    TEXT PRIMARY KEY,
    record      TEXT NOT NULL,
    updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS schema_version (
    version    INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);
INSERT OR IGNORE INTO schema_version(version) VALUES (1);
"""


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


class SqliteScheduleStore:
    """The schedule mapping kept in an embedded SQLite database, one row per set."""

    name = "sqlite"

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    async def init(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(self.db_path) as db:
            await db.executescript(SCHEMA_SQL)
            await db.commit()

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[aiosqlite.Connection]:
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            yield db

    async def _fetch_raw(self) -> dict[str, object]:
        raw: dict[str, object] = {}
        async with self.connect() as db:
            cursor = await db.execute("SELECT filename, record FROM study_schedule")
            for row in await cursor.fetchall():
                raw[row["filename"]] = json.loads(row["record"])
        return raw

    async def load(self) -> dict[str, ScheduleRecord]:
        try:
            raw = await self._fetch_raw()
        except (aiosqlite.Error, ValueError) as e:
            logger.warning("Could not read schedule from %s, using empty schedule: %s", self.db_path, e)
            return {}
        return parse_records(raw, strict=False)

    async def load_for_update(self) -> dict[str, ScheduleRecord]:
        try:
            raw = await self._fetch_raw()
        except (aiosqlite.Error, ValueError) as e:
            logger.error("Refusing to update unreadable schedule %s: %s", self.db_path, e)
            raise StorageError("Study schedule database is unreadable") from e
        return parse_records(raw, strict=True)

    async def save(self, schedules: Mapping[str, ScheduleRecord]) -> None:
        """Replace the whole mapping inside one transaction."""
        now = _now()
        rows = [
            (filename, json.dumps(data, ensure_ascii=False), now)
            for filename, data in dump_records(schedules).items()
        ]
        try:
            async with self.connect() as db:
                await db.execute("BEGIN IMMEDIATE")
                try:
                    await db.execute("DELETE FROM study_schedule")
                    await db.executemany(
                        "INSERT INTO study_schedule(filename, record, updated_at) VALUES (?, ?, ?)",
                        rows,
                    )
                except aiosqlite.Error:
                    await db.rollback()
                    raise
                await db.commit()
        except aiosqlite.Error as e:
            logger.error("Failed to save schedule to %s: %s", self.db_path, e)
            raise StorageError("Could not save study schedule") from e
