from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / ".vocabnote" / "data"
    vocabulary_dirname: str = "vocabulary_files"
    schedule_filename: str = ".study_schedule.json"
    schedule_backend: Literal["json", "sqlite"] = "json"
    sqlite_filename: str = "vocabnote.db"

    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("VOCABNOTE_GEMINI_API_KEY", "GEMINI_API_KEY"),
    )
    llm_model: str = "gemini-2.0-flash"
    llm_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    llm_timeout: float = 60.0
    llm_max_retries: int = 3
    llm_retry_initial_delay: float = 2.0  # seconds, doubled per retry

    default_word_count: int = 15
    min_word_count: int = 5
    max_word_count: int = 30

    host: str = "127.0.0.1"
    port: int = 3000  # 0 = pick a free port
    log_level: str = "INFO"

    model_config = {"env_prefix": "VOCABNOTE_", "env_file": ".env", "extra": "ignore",
                    "populate_by_name": True}

    @property
    def vocabulary_dir(self) -> Path:
        return self.data_dir / self.vocabulary_dirname

    @property
    def schedule_path(self) -> Path:
        return self.data_dir / self.schedule_filename

    @property
    def sqlite_path(self) -> Path:
        return self.data_dir / self.sqlite_filename


settings = Settings()
