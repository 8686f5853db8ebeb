"""Tests for the fixed-interval review schedule."""
from datetime import date

import pytest

from vocabnote.models.schedule import ScheduleRecord
from vocabnote.services.review_scheduler import (
    build_study_history,
    build_today_view,
    classify_review_type,
    compute_review_dates,
    next_review_date,
)


def _record(first: date, pending: list[date], done: list[date]) -> ScheduleRecord:
    return ScheduleRecord(
        first_study_date=first,
        last_review_date=done[-1],
        review_dates=pending,
        completed_reviews=done,
    )


@pytest.mark.parametrize(
    "first, expected",
    [
        (
            date(2024, 1, 1),
            [date(2024, 1, 2), date(2024, 1, 4), date(2024, 1, 7), date(2024, 1, 14)],
        ),
        (
            date(2024, 1, 30),
            [date(2024, 1, 31), date(2024, 2, 2), date(2024, 2, 5), date(2024, 2, 12)],
        ),
        (
            date(2023, 12, 25),
            [date(2023, 12, 26), date(2023, 12, 28), date(2023, 12, 31), date(2024, 1, 7)],
        ),
        (
            date(2024, 2, 27),
            [date(2024, 2, 28), date(2024, 3, 1), date(2024, 3, 4), date(2024, 3, 11)],
        ),
    ],
)
def test_compute_review_dates(first, expected):
    assert compute_review_dates(first) == expected


def test_compute_review_dates_is_pure():
    first = date(2024, 5, 10)
    assert compute_review_dates(first) == compute_review_dates(first)
    assert first == date(2024, 5, 10)


@pytest.mark.parametrize(
    "today, label",
    [
        (date(2024, 1, 2), "day2/first review"),
        (date(2024, 1, 4), "day4/second review"),
        (date(2024, 1, 7), "day7/third review"),
        (date(2024, 1, 14), "day14/final review"),
    ],
)
def test_classify_review_type(today, label):
    assert classify_review_type(date(2024, 1, 1), today) == label


@pytest.mark.parametrize("today", [date(2024, 1, 1), date(2024, 1, 3), date(2024, 1, 20), date(2023, 12, 1)])
def test_classify_review_type_outside_offsets_is_unlabeled(today):
    assert classify_review_type(date(2024, 1, 1), today) == ""


def test_sets_without_record_are_new(make_summary):
    sets = [make_summary("a.json"), make_summary("b.json", word_count=4)]

    view = build_today_view(sets, {}, date(2024, 1, 2))

    assert [e.filename for e in view.new_files] == ["a.json", "b.json"]
    assert all(e.status == "new" for e in view.new_files)
    assert view.new_files[1].word_count == 4
    assert view.review_files == []
    assert view.completed == []
    assert view.summary.total == 2
    assert view.summary.new == 2


def test_first_review_day_places_set_in_review(make_summary):
    first = date(2024, 1, 1)
    schedules = {"a.json": _record(first, compute_review_dates(first), [first])}

    view = build_today_view([make_summary("a.json")], schedules, date(2024, 1, 2))

    assert len(view.review_files) == 1
    entry = view.review_files[0]
    assert entry.status == "review"
    assert entry.review_type == "day2/first review"
    assert entry.completed_count == 1
    assert entry.first_study_date == first
    assert entry.created_date == date(2023, 12, 31)


def test_drifted_review_date_gets_empty_label(make_summary):
    first = date(2024, 1, 1)
    # A hand-edited schedule where a pending date no longer matches an offset.
    schedules = {"a.json": _record(first, [date(2024, 1, 5)], [first])}

    view = build_today_view([make_summary("a.json")], schedules, date(2024, 1, 5))

    assert view.review_files[0].review_type == ""


def test_upcoming_and_completed_classification(make_summary):
    first = date(2024, 1, 1)
    schedules = {
        "waiting.json": _record(
            first, [date(2024, 1, 4), date(2024, 1, 7), date(2024, 1, 14)], [first, date(2024, 1, 2)]
        ),
        "done.json": _record(
            first,
            [],
            [first, date(2024, 1, 2), date(2024, 1, 4), date(2024, 1, 7), date(2024, 1, 14)],
        ),
    }
    sets = [make_summary("waiting.json"), make_summary("done.json"), make_summary("fresh.json")]

    view = build_today_view(sets, schedules, date(2024, 1, 3))

    assert [e.filename for e in view.upcoming_files] == ["waiting.json"]
    assert view.upcoming_files[0].next_review_date == date(2024, 1, 4)
    assert view.upcoming_files[0].completed_count == 2
    assert [e.filename for e in view.completed] == ["done.json"]
    assert view.completed[0].completed_count == 5
    assert [e.filename for e in view.new_files] == ["fresh.json"]
    assert view.summary.model_dump() == {
        "total": 3,
        "new": 1,
        "review": 0,
        "upcoming": 1,
        "completed": 1,
    }


def test_today_view_is_repeatable(make_summary):
    first = date(2024, 1, 1)
    schedules = {"a.json": _record(first, compute_review_dates(first), [first])}
    sets = [make_summary("a.json"), make_summary("b.json")]

    first_view = build_today_view(sets, schedules, date(2024, 1, 4))
    second_view = build_today_view(sets, schedules, date(2024, 1, 4))

    assert first_view == second_view
    assert schedules["a.json"].review_dates == compute_review_dates(first)


def test_today_view_serializes_camel_case(make_summary):
    first = date(2024, 1, 1)
    schedules = {"a.json": _record(first, compute_review_dates(first), [first])}

    data = build_today_view([make_summary("a.json")], schedules, date(2024, 1, 2)).model_dump(
        mode="json", by_alias=True
    )

    assert set(data) == {"today", "newFiles", "reviewFiles", "upcomingFiles", "completed", "summary"}
    assert data["reviewFiles"][0]["reviewType"] == "day2/first review"
    assert data["reviewFiles"][0]["firstStudyDate"] == "2024-01-01"
    assert data["reviewFiles"][0]["completedCount"] == 1


def test_study_history_never_studied():
    history = build_study_history("a.json", None, date(2024, 1, 1))
    assert history.status == "never_studied"
    assert history.upcoming_reviews == []


def test_study_history_filters_upcoming_reviews():
    first = date(2024, 1, 1)
    # The day-2 review was skipped, so it is still pending but already past.
    record = _record(first, compute_review_dates(first), [first])

    history = build_study_history("a.json", record, date(2024, 1, 4))

    assert history.status == "studied"
    assert history.review_dates == compute_review_dates(first)
    assert history.upcoming_reviews == [date(2024, 1, 4), date(2024, 1, 7), date(2024, 1, 14)]


def test_next_review_date():
    first = date(2024, 1, 1)
    record = _record(first, [date(2024, 1, 7), date(2024, 1, 14)], [first])
    assert next_review_date(record, date(2024, 1, 5)) == date(2024, 1, 7)
    assert next_review_date(record, date(2024, 1, 15)) is None
