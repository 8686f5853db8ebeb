from fastapi import APIRouter, Depends

from vocabnote.config import Settings
from vocabnote.deps import get_settings
from vocabnote.models.vocabulary import (
    ExtractionResult,
    ExtractRequest,
    LookupRequest,
    LookupResult,
)
from vocabnote.services.vocabulary_extractor import extract_vocabulary, lookup_word

router = APIRouter()


@router.post("/extract", response_model=ExtractionResult)
async def extract(body: ExtractRequest, settings: Settings = Depends(get_settings)):
    """Pull study-worthy vocabulary out of a reading passage."""
    return await extract_vocabulary(body.passage, body.word_count, settings=settings)


@router.post("/lookup", response_model=LookupResult)
async def lookup(body: LookupRequest, settings: Settings = Depends(get_settings)):
    return await lookup_word(body.word, body.context, settings=settings)
