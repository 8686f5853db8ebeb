from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vocabnote.models.base import CamelModel


class WordEntry(BaseModel):
    # Keys match what the model is prompted to return, so stored files
    # round-trip unchanged.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    word: str
    phonetic: str | None = None
    part_of_speech: str | None = Field(default=None, alias="partOfSpeech")
    meaning_en: str | None = None
    meaning_vi: str | None = None
    context: str | None = None
    example: str | None = None

    @field_validator("word")
    @classmethod
    def _word_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("word must not be blank")
        return value


class VocabularySetSummary(CamelModel):
    filename: str
    word_count: int
    created_at: datetime
    modified_at: datetime
    size: int  # bytes on disk


class VocabularySet(CamelModel):
    filename: str
    vocabulary: list[WordEntry]
    word_count: int
    created_at: datetime
    modified_at: datetime


class VocabularySetList(CamelModel):
    files: list[VocabularySetSummary]


class VocabularySetCreate(CamelModel):
    filename: str
    vocabulary: list[WordEntry]


class VocabularySetSaved(CamelModel):
    success: bool = True
    message: str
    filename: str
    word_count: int


class ExtractRequest(CamelModel):
    passage: str
    word_count: int | None = None


class LookupRequest(CamelModel):
    word: str
    context: str | None = None


class ExtractionResult(CamelModel):
    vocabulary: list[WordEntry]
    is_mock_data: bool = False
    message: str | None = None


class LookupResult(CamelModel):
    vocabulary: WordEntry
    is_mock_data: bool = False
    message: str | None = None
