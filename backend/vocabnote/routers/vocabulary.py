import asyncio

from fastapi import APIRouter, Depends

from vocabnote.db import VocabularySetStore
from vocabnote.deps import get_study_marker, get_vocabulary_store
from vocabnote.models.vocabulary import (
    VocabularySet,
    VocabularySetCreate,
    VocabularySetList,
    VocabularySetSaved,
)
from vocabnote.services.study_marker import StudyMarker

router = APIRouter()


@router.post("", response_model=VocabularySetSaved, status_code=201)
async def save_vocabulary_set(
    body: VocabularySetCreate,
    store: VocabularySetStore = Depends(get_vocabulary_store),
):
    summary = await asyncio.to_thread(store.create, body.filename, body.vocabulary)
    return VocabularySetSaved(
        message="Vocabulary set saved",
        filename=summary.filename,
        word_count=summary.word_count,
    )


@router.get("", response_model=VocabularySetList)
async def list_vocabulary_sets(store: VocabularySetStore = Depends(get_vocabulary_store)):
    return VocabularySetList(files=await asyncio.to_thread(store.list_sets))


@router.get("/{filename}", response_model=VocabularySet)
async def get_vocabulary_set(
    filename: str, store: VocabularySetStore = Depends(get_vocabulary_store)
):
    return await asyncio.to_thread(store.get, filename)


@router.delete("/{filename}")
async def delete_vocabulary_set(
    filename: str,
    store: VocabularySetStore = Depends(get_vocabulary_store),
    marker: StudyMarker = Depends(get_study_marker),
):
    await asyncio.to_thread(store.delete, filename)
    # A set re-created under the same name starts with no study history.
    await marker.forget(filename)
    return {"success": True, "message": "Vocabulary set deleted"}
