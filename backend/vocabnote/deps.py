"""Request dependencies. Stores live on app.state, created in the lifespan."""
from datetime import date

from fastapi import Request

from vocabnote.config import Settings
from vocabnote.db import ScheduleStore, VocabularySetStore
from vocabnote.services.study_marker import StudyMarker


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_vocabulary_store(request: Request) -> VocabularySetStore:
    return request.app.state.vocabulary_store


def get_schedule_store(request: Request) -> ScheduleStore:
    return request.app.state.schedule_store


def get_study_marker(request: Request) -> StudyMarker:
    return request.app.state.study_marker


def get_today() -> date:
    return date.today()
