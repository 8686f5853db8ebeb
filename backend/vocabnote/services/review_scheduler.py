"""
Fixed-interval spaced-repetition schedule.

A vocabulary set studied for the first time on day D is reviewed on
D+1, D+3, D+6 and D+13 (the learner's days 2, 4, 7 and 14). Everything here
is pure: callers pass in the set metadata, the schedule mapping and "today".
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, timedelta

from vocabnote.models.schedule import (
    ScheduleRecord,
    StudyFileEntry,
    StudyHistory,
    StudySummary,
    TodayView,
)
from vocabnote.models.vocabulary import VocabularySetSummary

REVIEW_OFFSETS = (1, 3, 6, 13)

_REVIEW_LABELS = {
    1: "day2/first review",
    3: "day4/second review",
    6: "day7/third review",
    13: "day14/final review",
}


def compute_review_dates(first_study_date: date) -> list[date]:
    return [first_study_date + timedelta(days=offset) for offset in REVIEW_OFFSETS]


def classify_review_type(first_study_date: date, today: date) -> str:
    """Label a review by how many days have passed since the first study.

    Dates outside the fixed offsets (a skipped review that drifted) get an
    empty label instead of an error.
    """
    return _REVIEW_LABELS.get((today - first_study_date).days, "")


def _entry(
    summary: VocabularySetSummary,
    status: str,
    record: ScheduleRecord | None = None,
    **extra,
) -> StudyFileEntry:
    fields: dict = {
        "filename": summary.filename,
        "word_count": summary.word_count,
        "created_date": summary.created_at.date(),
        "status": status,
    }
    if record is not None:
        fields["first_study_date"] = record.first_study_date
        fields["completed_count"] = len(record.completed_reviews)
    fields.update(extra)
    return StudyFileEntry(**fields)


def build_today_view(
    sets: Iterable[VocabularySetSummary],
    schedules: Mapping[str, ScheduleRecord],
    today: date,
) -> TodayView:
    """Sort every vocabulary set into new / review / upcoming / completed."""
    new_files: list[StudyFileEntry] = []
    review_files: list[StudyFileEntry] = []
    upcoming_files: list[StudyFileEntry] = []
    completed: list[StudyFileEntry] = []
    total = 0

    for summary in sets:
        total += 1
        record = schedules.get(summary.filename)

        if record is None:
            new_files.append(_entry(summary, "new", message="Not studied yet"))
        elif today in record.review_dates:
            review_files.append(
                _entry(
                    summary,
                    "review",
                    record,
                    review_type=classify_review_type(record.first_study_date, today),
                )
            )
        elif not record.review_dates:
            completed.append(
                _entry(summary, "completed", record, message="All reviews completed")
            )
        else:
            upcoming_files.append(
                _entry(
                    summary,
                    "upcoming",
                    record,
                    next_review_date=min(record.review_dates),
                )
            )

    return TodayView(
        today=today,
        new_files=new_files,
        review_files=review_files,
        upcoming_files=upcoming_files,
        completed=completed,
        summary=StudySummary(
            total=total,
            new=len(new_files),
            review=len(review_files),
            upcoming=len(upcoming_files),
            completed=len(completed),
        ),
    )


def build_study_history(
    filename: str, record: ScheduleRecord | None, today: date
) -> StudyHistory:
    if record is None:
        return StudyHistory(
            filename=filename,
            status="never_studied",
            message="This set has never been studied",
        )
    return StudyHistory(
        filename=filename,
        status="studied",
        first_study_date=record.first_study_date,
        last_review_date=record.last_review_date,
        review_dates=list(record.review_dates),
        completed_reviews=list(record.completed_reviews),
        upcoming_reviews=[d for d in record.review_dates if d >= today],
    )


def next_review_date(record: ScheduleRecord, today: date) -> date | None:
    """Earliest pending review on or after today, if any."""
    upcoming = [d for d in record.review_dates if d >= today]
    return min(upcoming) if upcoming else None
