"""
Schedule persistence.

The schedule is one mapping of vocabulary-set filename -> ScheduleRecord.
Backends load and save the whole mapping; the scheduler never sees how it is
stored.

Read paths are forgiving (a missing or corrupt document loads as empty so the
study page still works on a cold start). The write path is strict: a corrupt
document raises instead of being silently replaced.
"""
from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from vocabnote.errors import StorageError
from vocabnote.models.schedule import ScheduleRecord

logger = logging.getLogger(__name__)


class ScheduleStore(Protocol):
    name: str

    async def init(self) -> None: ...

    async def load(self) -> dict[str, ScheduleRecord]: ...

    async def load_for_update(self) -> dict[str, ScheduleRecord]: ...

    async def save(self, schedules: Mapping[str, ScheduleRecord]) -> None: ...


def parse_records(raw: Any, strict: bool) -> dict[str, ScheduleRecord]:
    """Validate a decoded {filename: record} mapping.

    Non-strict parsing skips invalid records; strict parsing raises StorageError.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"expected a JSON object, got {type(raw).__name__}")

    records: dict[str, ScheduleRecord] = {}
    for filename, data in raw.items():
        try:
            records[filename] = ScheduleRecord.model_validate(data)
        except PydanticValidationError as e:
            if strict:
                raise StorageError(
                    f"Invalid schedule record for {filename!r}: {e.error_count()} error(s)"
                ) from e
            logger.warning("Skipping invalid schedule record for %s: %s", filename, e)
    return records


def dump_records(schedules: Mapping[str, ScheduleRecord]) -> dict[str, Any]:
    return {
        filename: record.model_dump(mode="json", by_alias=True)
        for filename, record in schedules.items()
    }


class JsonScheduleStore:
    """The whole schedule as a single JSON document, replaced atomically."""

    name = "json"

    def __init__(self, path: Path) -> None:
        self.path = path

    async def init(self) -> None:
        await asyncio.to_thread(self.path.parent.mkdir, parents=True, exist_ok=True)

    async def load(self) -> dict[str, ScheduleRecord]:
        try:
            return await asyncio.to_thread(self._read, False)
        except (OSError, ValueError) as e:
            logger.warning("Could not read schedule %s, using empty schedule: %s", self.path, e)
            return {}

    async def load_for_update(self) -> dict[str, ScheduleRecord]:
        try:
            return await asyncio.to_thread(self._read, True)
        except StorageError:
            raise
        except (OSError, ValueError) as e:
            logger.error("Refusing to update unreadable schedule %s: %s", self.path, e)
            raise StorageError("Study schedule file is unreadable") from e

    async def save(self, schedules: Mapping[str, ScheduleRecord]) -> None:
        payload = json.dumps(dump_records(schedules), indent=2, ensure_ascii=False)
        try:
            await asyncio.to_thread(self._write, payload)
        except OSError as e:
            logger.error("Failed to save schedule %s: %s", self.path, e)
            raise StorageError("Could not save study schedule") from e

    def _read(self, strict: bool) -> dict[str, ScheduleRecord]:
        if not self.path.exists():
            return {}
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        return parse_records(raw, strict=strict)

    def _write(self, payload: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
