from fastapi import APIRouter, Depends

from vocabnote.config import Settings
from vocabnote.db import ScheduleStore
from vocabnote.deps import get_schedule_store, get_settings
from vocabnote.services.llm_service import is_configured

router = APIRouter()


@router.get("/health")
async def health(
    settings: Settings = Depends(get_settings),
    schedule_store: ScheduleStore = Depends(get_schedule_store),
):
    return {
        "status": "ok",
        "llmConfigured": is_configured(settings),
        "scheduleBackend": schedule_store.name,
    }
