from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from flashdeck.modules.words.importer import DEFAULT_SEPARATORS
from flashdeck.modules.words.models import Language, Level, Word, WordCategory


class CatalogResponse(BaseModel):
    languages: list[str]
    levels: list[str]
    categories: list[str]
    directions: list[str]
    block_size: int


class GenerateWordsRequest(BaseModel):
    language: Language
    level: Level
    category: Optional[WordCategory] = None


class WordListResponse(BaseModel):
    language: Language
    count: int
    words: list[Word] = Field(default_factory=list)


class WordsPayload(BaseModel):
    words: list[Word] = Field(default_factory=list)


class AddWordRequest(BaseModel):
    word: str = Field(..., description="Foreign-language surface form")
    translation: str


class BulkImportRequest(BaseModel):
    text: str = Field(..., description="One 'word,translation' pair per line")
    separators: str = Field(default=DEFAULT_SEPARATORS, min_length=1)


class BulkImportResponse(WordListResponse):
    imported: int = 0
