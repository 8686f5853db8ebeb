"""
Vocabulary extraction and word lookup.

  1. Builds a prompt asking the model for word entries as JSON
  2. Calls the model via llm_service.generate_json()
  3. Validates each entry into a WordEntry

Entries that fail validation are logged and skipped. Without an API key the
functions return built-in sample entries flagged with is_mock_data.
"""
from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError

from vocabnote.config import Settings, settings as default_settings
from vocabnote.errors import MalformedResponseError, ValidationError
from vocabnote.models.vocabulary import ExtractionResult, LookupResult, WordEntry
from vocabnote.services import llm_service

logger = logging.getLogger(__name__)

MOCK_MESSAGE = "API key not configured. Using sample data."

_ENTRY_FIELDS = (
    "1. word: the vocabulary word\n"
    "2. phonetic: IPA pronunciation\n"
    "3. partOfSpeech: noun, verb, adjective, etc.\n"
    "4. meaning_en: English definition\n"
    "5. meaning_vi: Vietnamese translation\n"
)

_ENTRY_SHAPE = (
    "{\n"
    '  "word": "...",\n'
    '  "phonetic": "...",\n'
    '  "partOfSpeech": "...",\n'
    '  "meaning_en": "...",\n'
    '  "meaning_vi": "...",\n'
    '  "context": "...",\n'
    '  "example": "..."\n'
    "}"
)

SAMPLE_VOCABULARY = [
    {
        "word": "substantial",
        "phonetic": "/səbˈstænʃəl/",
        "partOfSpeech": "adjective",
        "meaning_en": "of considerable importance, size, or worth",
        "meaning_vi": "đáng kể, quan trọng",
        "context": "There has been substantial progress in the field of renewable energy.",
        "example": "The company made substantial profits this quarter.",
    },
    {
        "word": "prevalent",
        "phonetic": "/ˈprevələnt/",
        "partOfSpeech": "adjective",
        "meaning_en": "widespread in a particular area or at a particular time",
        "meaning_vi": "phổ biến, thịnh hành",
        "context": "This disease is prevalent in tropical regions.",
        "example": "Social media addiction has become increasingly prevalent among teenagers.",
    },
    {
        "word": "deteriorate",
        "phonetic": "/dɪˈtɪriəreɪt/",
        "partOfSpeech": "verb",
        "meaning_en": "become progressively worse",
        "meaning_vi": "xấu đi, suy giảm",
        "context": "The patient's condition began to deteriorate rapidly.",
        "example": "Without proper maintenance, the building will continue to deteriorate.",
    },
]


def clamp_word_count(word_count: int | None, settings: Settings) -> int:
    if word_count is None:
        word_count = settings.default_word_count
    return max(settings.min_word_count, min(settings.max_word_count, word_count))


def extraction_prompt(passage: str, word_count: int) -> str:
    return (
        "Analyze the following IELTS reading passage and extract advanced vocabulary "
        "words suitable for IELTS learners.\n"
        "For each word, provide the following information in JSON format:\n\n"
        f"{_ENTRY_FIELDS}"
        "6. context: the sentence from the passage where the word appears\n"
        "7. example: an additional example sentence using this word\n\n"
        f"Extract {word_count} words that would be most valuable for IELTS preparation. "
        "Focus on academic and formal vocabulary.\n\n"
        "Return ONLY a valid JSON array without any markdown formatting or additional "
        f"text. The format should be:\n[\n{_ENTRY_SHAPE}\n]\n\n"
        f"Passage:\n{passage}"
    )


def lookup_prompt(word: str, context: str | None) -> str:
    context_line = f'Context: "{context}"\n' if context else ""
    context_rule = (
        "use the provided context sentence" if context else "create a meaningful context sentence"
    )
    return (
        "Look up the following word/phrase and provide detailed information in JSON format:\n\n"
        f'Word/Phrase: "{word}"\n'
        f"{context_line}\n"
        "Provide the following information:\n"
        f"{_ENTRY_FIELDS}"
        f"6. context: {context_rule}\n"
        "7. example: an additional example sentence using this word\n\n"
        "Return ONLY a valid JSON object (not an array) without any markdown formatting "
        f"or additional text. The format should be:\n{_ENTRY_SHAPE}"
    )


def _to_entries(items: list) -> list[WordEntry]:
    entries: list[WordEntry] = []
    for item in items:
        try:
            entries.append(WordEntry.model_validate(item))
        except PydanticValidationError as e:
            logger.warning("Skipping invalid vocabulary entry %r: %s", item, e)
    return entries


async def extract_vocabulary(
    passage: str,
    word_count: int | None = None,
    settings: Settings | None = None,
) -> ExtractionResult:
    settings = settings or default_settings
    passage = (passage or "").strip()
    if not passage:
        raise ValidationError("Passage text is required")

    if not llm_service.is_configured(settings):
        logger.info("Using sample vocabulary (no API key configured)")
        return ExtractionResult(
            vocabulary=_to_entries(SAMPLE_VOCABULARY),
            is_mock_data=True,
            message=MOCK_MESSAGE,
        )

    count = clamp_word_count(word_count, settings)
    result = await llm_service.generate_json(extraction_prompt(passage, count), settings=settings)
    if not isinstance(result, list):
        raise MalformedResponseError("Expected a JSON array of vocabulary entries")

    entries = _to_entries(result)
    logger.info("Extracted %d vocabulary entries (requested %d)", len(entries), count)
    return ExtractionResult(vocabulary=entries)


async def lookup_word(
    word: str,
    context: str | None = None,
    settings: Settings | None = None,
) -> LookupResult:
    settings = settings or default_settings
    word = (word or "").strip()
    if not word:
        raise ValidationError("A word or phrase to look up is required")
    context = (context or "").strip() or None

    if not llm_service.is_configured(settings):
        logger.info("Using sample lookup data (no API key configured)")
        sample = WordEntry(
            word=word,
            phonetic="/ˈeksəmpl/",
            part_of_speech="noun",
            meaning_en="a thing characteristic of its kind or illustrating a general rule",
            meaning_vi="ví dụ, mẫu",
            context=context or "This is a context sentence.",
            example="For example, this is how you use it.",
        )
        return LookupResult(vocabulary=sample, is_mock_data=True, message=MOCK_MESSAGE)

    result = await llm_service.generate_json(lookup_prompt(word, context), settings=settings)
    if not isinstance(result, dict) or not result.get("word"):
        raise MalformedResponseError("Expected a JSON object describing the word")
    try:
        entry = WordEntry.model_validate(result)
    except PydanticValidationError as e:
        raise MalformedResponseError("The language model returned an invalid word entry") from e
    return LookupResult(vocabulary=entry)
