from vocabnote.models.schedule import (
    MarkStudiedRequest,
    MarkStudiedResult,
    ScheduleRecord,
    StudyFileEntry,
    StudyHistory,
    StudySummary,
    TodayView,
)
from vocabnote.models.vocabulary import (
    ExtractionResult,
    ExtractRequest,
    LookupRequest,
    LookupResult,
    VocabularySet,
    VocabularySetCreate,
    VocabularySetList,
    VocabularySetSaved,
    VocabularySetSummary,
    WordEntry,
)

__all__ = [
    "ExtractRequest",
    "ExtractionResult",
    "LookupRequest",
    "LookupResult",
    "MarkStudiedRequest",
    "MarkStudiedResult",
    "ScheduleRecord",
    "StudyFileEntry",
    "StudyHistory",
    "StudySummary",
    "TodayView",
    "VocabularySet",
    "VocabularySetCreate",
    "VocabularySetList",
    "VocabularySetSaved",
    "VocabularySetSummary",
    "WordEntry",
]
