from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import field_validator

from vocabnote.models.base import CamelModel


class ScheduleRecord(CamelModel):
    first_study_date: date                       # set once, never changed
    last_review_date: date
    review_dates: list[date] = []                # pending reviews, only shrinks
    completed_reviews: list[date] = []           # studied days, no duplicates

    @field_validator("review_dates", "completed_reviews", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class StudyFileEntry(CamelModel):
    filename: str
    word_count: int
    created_date: date
    status: Literal["new", "review", "upcoming", "completed"]
    message: str | None = None
    review_type: str | None = None
    first_study_date: date | None = None
    completed_count: int | None = None
    next_review_date: date | None = None


class StudySummary(CamelModel):
    total: int
    new: int
    review: int
    upcoming: int
    completed: int


class TodayView(CamelModel):
    today: date
    new_files: list[StudyFileEntry]
    review_files: list[StudyFileEntry]
    upcoming_files: list[StudyFileEntry]
    completed: list[StudyFileEntry]
    summary: StudySummary


class StudyHistory(CamelModel):
    filename: str
    status: Literal["studied", "never_studied"]
    message: str | None = None
    first_study_date: date | None = None
    last_review_date: date | None = None
    review_dates: list[date] = []
    completed_reviews: list[date] = []
    upcoming_reviews: list[date] = []


class MarkStudiedRequest(CamelModel):
    filename: str
    is_first_time: bool = False


class MarkStudiedResult(CamelModel):
    success: bool = True
    message: str
    schedule: ScheduleRecord
    next_review_date: date | None = None
