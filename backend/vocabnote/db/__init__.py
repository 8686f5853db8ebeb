from vocabnote.config import Settings
from vocabnote.db.schedule_store import JsonScheduleStore, ScheduleStore
from vocabnote.db.sqlite import SqliteScheduleStore
from vocabnote.db.vocabulary_store import VocabularySetStore


def create_schedule_store(settings: Settings) -> ScheduleStore:
    if settings.schedule_backend == "sqlite":
        return SqliteScheduleStore(settings.sqlite_path)
    return JsonScheduleStore(settings.schedule_path)


async def init_all_stores(
    settings: Settings,
) -> tuple[VocabularySetStore, ScheduleStore]:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    vocabulary_store = VocabularySetStore(settings.vocabulary_dir)
    vocabulary_store.init()
    schedule_store = create_schedule_store(settings)
    await schedule_store.init()
    return vocabulary_store, schedule_store


__all__ = [
    "JsonScheduleStore",
    "ScheduleStore",
    "SqliteScheduleStore",
    "VocabularySetStore",
    "create_schedule_store",
    "init_all_stores",
]
