from datetime import date, datetime, timezone

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from vocabnote import create_app
from vocabnote.config import Settings
from vocabnote.db import JsonScheduleStore, SqliteScheduleStore, VocabularySetStore
from vocabnote.deps import get_today
from vocabnote.models.vocabulary import VocabularySetSummary, WordEntry


class FakeClock:
    """Stands in for date.today() so schedule tests can move through days."""

    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_dir=tmp_path / "data",
        gemini_api_key="",
        llm_retry_initial_delay=0,
    )


@pytest.fixture
def clock():
    return FakeClock(date(2024, 1, 1))


@pytest.fixture
def client(settings, clock):
    app = create_app(settings)
    app.dependency_overrides[get_today] = clock
    with TestClient(app) as c:
        yield c


@pytest.fixture
def vocabulary_store(tmp_path):
    store = VocabularySetStore(tmp_path / "vocabulary_files")
    store.init()
    return store


@pytest_asyncio.fixture(params=["json", "sqlite"])
async def schedule_store(request, tmp_path):
    if request.param == "json":
        store = JsonScheduleStore(tmp_path / ".study_schedule.json")
    else:
        store = SqliteScheduleStore(tmp_path / "vocabnote.db")
    await store.init()
    return store


@pytest.fixture
def words():
    return [
        WordEntry(word="substantial", part_of_speech="adjective", meaning_vi="đáng kể"),
        WordEntry(word="prevalent", part_of_speech="adjective"),
        WordEntry(word="deteriorate", part_of_speech="verb"),
    ]


@pytest.fixture
def make_summary():
    """Build set metadata without touching the filesystem."""

    def _make(filename: str, word_count: int = 10) -> VocabularySetSummary:
        created = datetime(2023, 12, 31, 8, 30, tzinfo=timezone.utc)
        return VocabularySetSummary(
            filename=filename,
            word_count=word_count,
            created_at=created,
            modified_at=created,
            size=256,
        )

    return _make
