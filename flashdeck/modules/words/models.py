"""Pydantic models and enumerations for vocabulary words.

Words are frozen: stores replace them wholesale instead of mutating them.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Language(str, Enum):
    ENGLISH = "english"
    SPANISH = "spanish"

    @property
    def display_name(self) -> str:
        return _LANGUAGE_NAMES[self]


_LANGUAGE_NAMES = {
    Language.ENGLISH: "English",
    Language.SPANISH: "Spanish",
}


class Level(str, Enum):
    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"
    # Routes to the user's own word list instead of generation
    CUSTOM = "custom"


class WordCategory(str, Enum):
    NOUN = "nouns"
    ADJECTIVE = "adjectives"
    VERB = "verbs"
    NUMERAL = "numerals"
    PRONOUN = "pronouns"
    ADVERB = "adverbs"
    PREPOSITION = "prepositions"
    CONJUNCTION = "conjunctions"
    INTERJECTION = "interjections"
    PARTICLE = "particles"
    CUSTOM = "custom"


class TranslationDirection(str, Enum):
    FOREIGN_TO_NATIVE = "foreign_to_native"
    NATIVE_TO_FOREIGN = "native_to_foreign"


class Word(BaseModel):
    """A single vocabulary entry: foreign surface form and its translation."""

    model_config = ConfigDict(frozen=True)

    word: str
    translation: str


class WordList(BaseModel):
    """Structured output for word-list generation."""

    words: list[Word] = Field(default_factory=list)


class Card(BaseModel):
    """The two faces of a flashcard for a given translation direction."""

    front: str
    back: str

    @classmethod
    def from_word(cls, word: Word, direction: TranslationDirection) -> "Card":
        if direction == TranslationDirection.NATIVE_TO_FOREIGN:
            return cls(front=word.translation, back=word.word)
        return cls(front=word.word, back=word.translation)
