"""
Applies "studied" events to the schedule.

First-time study creates the record and its four review dates; a review
removes today's date from the pending list and records the day as done.
Marking the same day twice changes nothing the second time.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import date

from vocabnote.db.schedule_store import ScheduleStore
from vocabnote.errors import PreconditionError, ValidationError
from vocabnote.models.schedule import ScheduleRecord
from vocabnote.services.review_scheduler import compute_review_dates

logger = logging.getLogger(__name__)


def apply_first_study(existing: ScheduleRecord | None, filename: str, today: date) -> ScheduleRecord:
    if existing is not None:
        raise PreconditionError(
            f"{filename} was already studied for the first time on "
            f"{existing.first_study_date.isoformat()}"
        )
    return ScheduleRecord(
        first_study_date=today,
        last_review_date=today,
        review_dates=compute_review_dates(today),
        completed_reviews=[today],
    )


def apply_review(existing: ScheduleRecord | None, filename: str, today: date) -> ScheduleRecord:
    if existing is None:
        raise PreconditionError(f"{filename} has never been studied, study it for the first time first")

    completed = list(existing.completed_reviews)
    if today not in completed:
        completed.append(today)

    return existing.model_copy(
        update={
            "last_review_date": today,
            "review_dates": [d for d in existing.review_dates if d != today],
            "completed_reviews": completed,
        }
    )


class StudyMarker:
    """Serialises read-modify-write of the schedule within this process."""

    def __init__(self, store: ScheduleStore) -> None:
        self.store = store
        self._lock = asyncio.Lock()

    async def mark_studied(self, filename: str, is_first_time: bool, today: date) -> ScheduleRecord:
        filename = (filename or "").strip()
        if not filename:
            raise ValidationError("A filename is required")

        async with self._lock:
            schedules = await self.store.load_for_update()
            existing = schedules.get(filename)

            if is_first_time:
                record = apply_first_study(existing, filename, today)
            else:
                record = apply_review(existing, filename, today)

            schedules[filename] = record
            await self.store.save(schedules)

        logger.info(
            "Marked %s as studied on %s (%s), %d review(s) pending",
            filename,
            today.isoformat(),
            "first time" if is_first_time else "review",
            len(record.review_dates),
        )
        return record

    async def forget(self, filename: str) -> bool:
        """Drop the schedule record of a deleted set. Returns False if it had none."""
        async with self._lock:
            schedules = await self.store.load_for_update()
            if schedules.pop(filename, None) is None:
                return False
            await self.store.save(schedules)

        logger.info("Removed schedule record of %s", filename)
        return True
