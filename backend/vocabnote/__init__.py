import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vocabnote.config import Settings, settings as default_settings
from vocabnote.db import init_all_stores
from vocabnote.errors import StorageError, VocabNoteError

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def create_app(app_settings: Settings | None = None) -> FastAPI:
    app_settings = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from vocabnote.services.study_marker import StudyMarker

        vocabulary_store, schedule_store = await init_all_stores(app_settings)
        app.state.settings = app_settings
        app.state.vocabulary_store = vocabulary_store
        app.state.schedule_store = schedule_store
        app.state.study_marker = StudyMarker(schedule_store)
        logger.info(
            "Data in %s (schedule backend: %s)", app_settings.data_dir, schedule_store.name
        )
        if not app_settings.gemini_api_key:
            logger.warning("GEMINI_API_KEY not set; extraction and lookup return sample data")
        yield

    application = FastAPI(
        title="VocabNote Backend", version="0.1.0", lifespan=lifespan
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.exception_handler(VocabNoteError)
    async def vocabnote_error_handler(request: Request, exc: VocabNoteError):
        if isinstance(exc, StorageError):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    from vocabnote.routers import extract, health, study, vocabulary

    application.include_router(health.router)
    application.include_router(
        extract.router, prefix="/api", tags=["extract"]
    )
    application.include_router(
        vocabulary.router, prefix="/api/vocabulary-files", tags=["vocabulary"]
    )
    application.include_router(
        study.router, prefix="/api/study", tags=["study"]
    )

    return application


app = create_app()
