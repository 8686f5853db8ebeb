"""
Vocabulary sets stored as one JSON file each.

A file holds the JSON array of word entries and nothing else; word count and
timestamps are derived from the file when listed. All methods are blocking,
call them through asyncio.to_thread() from request handlers.
"""
from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from vocabnote.errors import ConflictError, NotFoundError, StorageError, ValidationError
from vocabnote.models.vocabulary import VocabularySet, VocabularySetSummary, WordEntry

logger = logging.getLogger(__name__)

# Stem length cap, well under the usual 255-byte filename limit.
MAX_NAME_LENGTH = 200

_UNSAFE_CHARS = re.compile(r"[^a-z0-9_-]", re.IGNORECASE)
_VALID_FILENAME = re.compile(rf"^[a-z0-9_-]{{1,{MAX_NAME_LENGTH}}}\.json$")

_entries_adapter = TypeAdapter(list[WordEntry])


def sanitize_filename(name: str) -> str:
    """Turn a user-supplied set name into a safe ``<name>.json`` identifier."""
    stem = (name or "").strip()
    if stem.lower().endswith(".json"):
        stem = stem[: -len(".json")]
    if not stem:
        raise ValidationError("A name for the vocabulary set is required")
    if len(stem) > MAX_NAME_LENGTH:
        raise ValidationError(
            f"Vocabulary set names are limited to {MAX_NAME_LENGTH} characters"
        )
    return f"{_UNSAFE_CHARS.sub('_', stem).lower()}.json"


def _timestamp(ts: float) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


class VocabularySetStore:
    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def init(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, filename: str) -> Path:
        if not _VALID_FILENAME.match(filename or ""):
            raise NotFoundError(f"Vocabulary set not found: {filename}")
        return self.directory / filename

    def exists(self, filename: str) -> bool:
        try:
            return self._path(filename).is_file()
        except NotFoundError:
            return False

    def create(self, name: str, words: Sequence[WordEntry]) -> VocabularySetSummary:
        filename = sanitize_filename(name)
        path = self.directory / filename
        payload = json.dumps(
            [w.model_dump(mode="json", by_alias=True) for w in words],
            indent=2,
            ensure_ascii=False,
        )
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # "x" mode: the existence check and the create are one step.
            with path.open("x", encoding="utf-8") as f:
                f.write(payload)
        except FileExistsError as e:
            raise ConflictError(
                f"A vocabulary set named {filename} already exists, choose another name"
            ) from e
        except OSError as e:
            logger.error("Failed to save vocabulary set %s: %s", filename, e)
            raise StorageError(f"Could not save vocabulary set {filename}") from e

        logger.info("Saved vocabulary set %s (%d words)", filename, len(words))
        return self._summary(path, len(words))

    def get(self, filename: str) -> VocabularySet:
        path = self._path(filename)
        if not path.is_file():
            raise NotFoundError(f"Vocabulary set not found: {filename}")
        try:
            words = self._read_entries(path)
            stat = path.stat()
        except OSError as e:
            logger.error("Failed to read vocabulary set %s: %s", filename, e)
            raise StorageError(f"Could not read vocabulary set {filename}") from e
        except (ValueError, PydanticValidationError) as e:
            logger.error("Vocabulary set %s is malformed: %s", filename, e)
            raise StorageError(f"Vocabulary set {filename} is malformed") from e

        return VocabularySet(
            filename=filename,
            vocabulary=words,
            word_count=len(words),
            created_at=_timestamp(_created_ts(stat)),
            modified_at=_timestamp(stat.st_mtime),
        )

    def list_sets(self) -> list[VocabularySetSummary]:
        """All sets, most recently modified first."""
        if not self.directory.is_dir():
            return []

        summaries: list[VocabularySetSummary] = []
        for path in self.directory.iterdir():
            if path.name.startswith(".") or not _VALID_FILENAME.match(path.name):
                continue
            if not path.is_file():
                continue
            try:
                word_count = self._count_entries(path)
            except (OSError, ValueError) as e:
                logger.warning("Unreadable vocabulary set %s: %s", path.name, e)
                word_count = 0
            try:
                summaries.append(self._summary(path, word_count))
            except OSError as e:
                logger.warning("Skipping vocabulary set %s: %s", path.name, e)

        summaries.sort(key=lambda s: s.modified_at, reverse=True)
        return summaries

    def delete(self, filename: str) -> None:
        path = self._path(filename)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise NotFoundError(f"Vocabulary set not found: {filename}") from e
        except OSError as e:
            logger.error("Failed to delete vocabulary set %s: %s", filename, e)
            raise StorageError(f"Could not delete vocabulary set {filename}") from e
        logger.info("Deleted vocabulary set %s", filename)

    @staticmethod
    def _read_entries(path: Path) -> list[WordEntry]:
        return _entries_adapter.validate_json(path.read_bytes())

    @staticmethod
    def _count_entries(path: Path) -> int:
        content = json.loads(path.read_text(encoding="utf-8"))
        return len(content) if isinstance(content, list) else 0

    @staticmethod
    def _summary(path: Path, word_count: int) -> VocabularySetSummary:
        stat = path.stat()
        return VocabularySetSummary(
            filename=path.name,
            word_count=word_count,
            created_at=_timestamp(_created_ts(stat)),
            modified_at=_timestamp(stat.st_mtime),
            size=stat.st_size,
        )


def _created_ts(stat) -> float:
    # st_birthtime only exists on some platforms.
    return getattr(stat, "st_birthtime", None) or min(stat.st_ctime, stat.st_mtime)
