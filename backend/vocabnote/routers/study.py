"""
Study schedule router.

Endpoints:
  GET  /api/study/today               - sets to learn, review, wait on, or done
  POST /api/study/mark-studied        - record a first study or a review for today
  GET  /api/study/history/{filename}  - schedule record of one set
"""
from __future__ import annotations

import asyncio
from datetime import date

from fastapi import APIRouter, Depends

from vocabnote.db import ScheduleStore, VocabularySetStore
from vocabnote.deps import get_schedule_store, get_study_marker, get_today, get_vocabulary_store
from vocabnote.errors import NotFoundError, ValidationError
from vocabnote.models.schedule import (
    MarkStudiedRequest,
    MarkStudiedResult,
    StudyHistory,
    TodayView,
)
from vocabnote.services.review_scheduler import (
    build_study_history,
    build_today_view,
    next_review_date,
)
from vocabnote.services.study_marker import StudyMarker

router = APIRouter()


@router.get("/today", response_model=TodayView)
async def today_study_view(
    today: date = Depends(get_today),
    vocabulary_store: VocabularySetStore = Depends(get_vocabulary_store),
    schedule_store: ScheduleStore = Depends(get_schedule_store),
) -> TodayView:
    sets = await asyncio.to_thread(vocabulary_store.list_sets)
    schedules = await schedule_store.load()
    return build_today_view(sets, schedules, today)


@router.post("/mark-studied", response_model=MarkStudiedResult)
async def mark_studied(
    body: MarkStudiedRequest,
    today: date = Depends(get_today),
    vocabulary_store: VocabularySetStore = Depends(get_vocabulary_store),
    marker: StudyMarker = Depends(get_study_marker),
) -> MarkStudiedResult:
    filename = body.filename.strip()
    if not filename:
        raise ValidationError("A filename is required")
    if not await asyncio.to_thread(vocabulary_store.exists, filename):
        raise NotFoundError(f"Vocabulary set not found: {filename}")

    record = await marker.mark_studied(filename, body.is_first_time, today)
    return MarkStudiedResult(
        message="Marked as studied",
        schedule=record,
        next_review_date=next_review_date(record, today),
    )


@router.get("/history/{filename}", response_model=StudyHistory)
async def study_history(
    filename: str,
    today: date = Depends(get_today),
    schedule_store: ScheduleStore = Depends(get_schedule_store),
) -> StudyHistory:
    schedules = await schedule_store.load()
    return build_study_history(filename, schedules.get(filename), today)
