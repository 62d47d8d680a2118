from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from flashdeck.core.config import settings
from flashdeck.apis.deps import get_custom_store, get_unknown_store
from flashdeck.modules.words.importer import BulkImportError, parse_bulk_words
from flashdeck.modules.words.models import (
    Language,
    Level,
    TranslationDirection,
    Word,
    WordCategory,
)
from flashdeck.modules.words.source import generate_words
from flashdeck.modules.words.store import WordStore
from .schemas import (
    AddWordRequest,
    BulkImportRequest,
    BulkImportResponse,
    CatalogResponse,
    GenerateWordsRequest,
    WordListResponse,
    WordsPayload,
)


router = APIRouter()

UnknownStore = Annotated[WordStore, Depends(get_unknown_store)]
CustomStore = Annotated[WordStore, Depends(get_custom_store)]


def _listing(language: Language, words: list[Word]) -> WordListResponse:
    return WordListResponse(language=language, count=len(words), words=words)


@router.get(
    f"/{settings.app.version}/catalog",
    response_model=CatalogResponse,
    tags=["words"],
)
async def get_catalog() -> CatalogResponse:
    return CatalogResponse(
        languages=[l.value for l in Language],
        levels=[l.value for l in Level],
        categories=[c.value for c in WordCategory],
        directions=[d.value for d in TranslationDirection],
        block_size=settings.study.block_size,
    )


@router.post(
    f"/{settings.app.version}/words/generate",
    response_model=WordListResponse,
    tags=["words"],
)
async def generate(req: GenerateWordsRequest) -> WordListResponse:
    if req.level == Level.CUSTOM or req.category == WordCategory.CUSTOM:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Custom words are not generated",
        )
    words = await generate_words(req.language, req.level, req.category)
    return _listing(req.language, words)


# Unknown (review) words ---------------------------------------------------
@router.get(
    f"/{settings.app.version}/words/{{language}}/unknown",
    response_model=WordListResponse,
    tags=["words"],
)
async def list_unknown(language: Language, store: UnknownStore) -> WordListResponse:
    return _listing(language, store.get(language))


@router.put(
    f"/{settings.app.version}/words/{{language}}/unknown",
    response_model=WordListResponse,
    tags=["words"],
)
async def replace_unknown(
    language: Language, payload: WordsPayload, store: UnknownStore
) -> WordListResponse:
    return _listing(language, store.set(language, payload.words))


@router.post(
    f"/{settings.app.version}/words/{{language}}/unknown",
    response_model=WordListResponse,
    tags=["words"],
)
async def add_unknown(
    language: Language, payload: WordsPayload, store: UnknownStore
) -> WordListResponse:
    return _listing(language, store.add(language, payload.words))


@router.post(
    f"/{settings.app.version}/words/{{language}}/unknown/remove",
    response_model=WordListResponse,
    tags=["words"],
)
async def remove_unknown(
    language: Language, payload: WordsPayload, store: UnknownStore
) -> WordListResponse:
    return _listing(language, store.remove_known(language, payload.words))


# Custom words ------------------------------------------------------------
@router.get(
    f"/{settings.app.version}/words/{{language}}/custom",
    response_model=WordListResponse,
    tags=["words"],
)
async def list_custom(language: Language, store: CustomStore) -> WordListResponse:
    return _listing(language, store.get(language))


@router.post(
    f"/{settings.app.version}/words/{{language}}/custom",
    response_model=WordListResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["words"],
)
async def add_custom(
    language: Language, req: AddWordRequest, store: CustomStore
) -> WordListResponse:
    word, translation = req.word.strip(), req.translation.strip()
    if not word or not translation:
        raise HTTPException(
            status_code=422,
            detail="Both word and translation are required",
        )
    return _listing(
        language, store.add(language, [Word(word=word, translation=translation)])
    )


@router.post(
    f"/{settings.app.version}/words/{{language}}/custom/import",
    response_model=BulkImportResponse,
    tags=["words"],
)
async def import_custom(
    language: Language, req: BulkImportRequest, store: CustomStore
) -> BulkImportResponse:
    try:
        parsed = parse_bulk_words(req.text, req.separators)
    except BulkImportError as e:
        raise HTTPException(
            status_code=422, detail=str(e)
        )
    words = store.add(language, parsed)
    return BulkImportResponse(
        language=language, count=len(words), words=words, imported=len(parsed)
    )


@router.delete(
    f"/{settings.app.version}/words/{{language}}/custom/{{word:path}}",
    response_model=WordListResponse,
    tags=["words"],
)
async def delete_custom(
    language: Language, word: str, store: CustomStore
) -> WordListResponse:
    return _listing(language, store.delete(language, word))
