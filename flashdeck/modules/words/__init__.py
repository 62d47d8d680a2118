"""Words module exports."""

from .models import (
    Card,
    Language,
    Level,
    TranslationDirection,
    Word,
    WordCategory,
    WordList,
)
from .importer import BulkImportError, parse_bulk_words
from .store import WordStore, custom_words_store, unknown_words_store
from .source import generate_words

__all__ = [
    "Card",
    "Language",
    "Level",
    "TranslationDirection",
    "Word",
    "WordCategory",
    "WordList",
    "BulkImportError",
    "parse_bulk_words",
    "WordStore",
    "custom_words_store",
    "unknown_words_store",
    "generate_words",
]
