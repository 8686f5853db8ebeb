"""Tests for marking vocabulary sets as studied."""
import asyncio
import json
from datetime import date

import pytest

from vocabnote.db import JsonScheduleStore
from vocabnote.errors import PreconditionError, StorageError, ValidationError
from vocabnote.services.review_scheduler import build_today_view
from vocabnote.services.study_marker import StudyMarker

DAY_1 = date(2024, 1, 1)


@pytest.fixture
def marker(schedule_store):
    return StudyMarker(schedule_store)


@pytest.mark.asyncio
async def test_first_study_creates_record(marker, schedule_store):
    record = await marker.mark_studied("a.json", True, DAY_1)

    assert record.first_study_date == DAY_1
    assert record.last_review_date == DAY_1
    assert record.review_dates == [
        date(2024, 1, 2),
        date(2024, 1, 4),
        date(2024, 1, 7),
        date(2024, 1, 14),
    ]
    assert record.completed_reviews == [DAY_1]
    assert (await schedule_store.load())["a.json"] == record


@pytest.mark.asyncio
async def test_second_first_study_is_rejected(marker, schedule_store):
    original = await marker.mark_studied("a.json", True, DAY_1)

    with pytest.raises(PreconditionError):
        await marker.mark_studied("a.json", True, date(2024, 1, 5))

    assert (await schedule_store.load())["a.json"] == original


@pytest.mark.asyncio
async def test_review_of_never_studied_set_is_rejected(marker, schedule_store):
    with pytest.raises(PreconditionError):
        await marker.mark_studied("a.json", False, DAY_1)

    assert await schedule_store.load() == {}


@pytest.mark.asyncio
async def test_blank_filename_is_rejected(marker):
    with pytest.raises(ValidationError):
        await marker.mark_studied("  ", True, DAY_1)


@pytest.mark.asyncio
async def test_review_twice_same_day_is_idempotent(marker):
    await marker.mark_studied("a.json", True, DAY_1)
    review_day = date(2024, 1, 2)

    after_first = await marker.mark_studied("a.json", False, review_day)
    after_second = await marker.mark_studied("a.json", False, review_day)

    assert after_second.completed_reviews.count(review_day) == 1
    assert after_second.completed_reviews == [DAY_1, review_day]
    assert after_second.review_dates == after_first.review_dates
    assert after_second.review_dates == [date(2024, 1, 4), date(2024, 1, 7), date(2024, 1, 14)]


@pytest.mark.asyncio
async def test_review_on_non_due_day_is_tolerated(marker):
    await marker.mark_studied("a.json", True, DAY_1)

    record = await marker.mark_studied("a.json", False, date(2024, 1, 3))

    assert record.last_review_date == date(2024, 1, 3)
    assert date(2024, 1, 3) in record.completed_reviews
    assert len(record.review_dates) == 4
    assert record.first_study_date == DAY_1


@pytest.mark.asyncio
async def test_all_reviews_drain_schedule(marker, schedule_store, make_summary):
    first = await marker.mark_studied("a.json", True, DAY_1)

    for review_day in first.review_dates:
        record = await marker.mark_studied("a.json", False, review_day)

    assert record.review_dates == []
    assert len(record.completed_reviews) == 5

    view = build_today_view([make_summary("a.json")], await schedule_store.load(), date(2024, 3, 1))
    assert [e.filename for e in view.completed] == ["a.json"]
    assert view.summary.completed == 1


@pytest.mark.asyncio
async def test_concurrent_marks_are_not_lost(marker, schedule_store):
    names = [f"set_{i}.json" for i in range(8)]

    await asyncio.gather(*(marker.mark_studied(name, True, DAY_1) for name in names))

    assert sorted(await schedule_store.load()) == sorted(names)


@pytest.mark.asyncio
async def test_corrupt_schedule_is_not_overwritten(tmp_path):
    path = tmp_path / ".study_schedule.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonScheduleStore(path)
    marker = StudyMarker(store)

    assert await store.load() == {}
    with pytest.raises(StorageError):
        await marker.mark_studied("a.json", True, DAY_1)

    assert path.read_text(encoding="utf-8") == "{not json"


@pytest.mark.asyncio
async def test_review_of_record_with_null_lists(tmp_path):
    path = tmp_path / ".study_schedule.json"
    path.write_text(
        json.dumps(
            {
                "a.json": {
                    "firstStudyDate": "2024-01-01",
                    "lastReviewDate": "2024-01-01",
                    "reviewDates": None,
                }
            }
        ),
        encoding="utf-8",
    )
    marker = StudyMarker(JsonScheduleStore(path))

    record = await marker.mark_studied("a.json", False, date(2024, 1, 5))

    assert record.review_dates == []
    assert record.completed_reviews == [date(2024, 1, 5)]


@pytest.mark.asyncio
async def test_forget_drops_record(marker, schedule_store):
    await marker.mark_studied("a.json", True, DAY_1)
    await marker.mark_studied("b.json", True, DAY_1)

    assert await marker.forget("a.json") is True
    assert await marker.forget("a.json") is False
    assert list(await schedule_store.load()) == ["b.json"]

    record = await marker.mark_studied("a.json", True, date(2024, 2, 1))
    assert record.first_study_date == date(2024, 2, 1)
