"""Screen sequencing for a study flow.

language -> level -> category -> direction -> flashcards -> summary/review.
Choosing the ``custom`` level routes through the custom word list instead of
category selection. Requesting a screen whose upstream selections are missing
resets the flow to language selection rather than failing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from flashdeck.core.logging import get_logger
from flashdeck.modules.words.models import (
    Language,
    Level,
    TranslationDirection,
    WordCategory,
)

logger = get_logger(__name__)


class View(str, Enum):
    LANGUAGE_SELECTION = "language_selection"
    LEVEL_SELECTION = "level_selection"
    CATEGORY_SELECTION = "category_selection"
    DIRECTION_SELECTION = "direction_selection"
    FLASHCARDS = "flashcards"
    REVIEW = "review"
    BLOCK_SUMMARY = "block_summary"
    CUSTOM_WORDS_MANAGEMENT = "custom_words_management"


_REQUIRES: dict[View, tuple[str, ...]] = {
    View.LANGUAGE_SELECTION: (),
    View.LEVEL_SELECTION: ("language",),
    View.CUSTOM_WORDS_MANAGEMENT: ("language",),
    View.REVIEW: ("language",),
    View.CATEGORY_SELECTION: ("language", "level"),
    View.DIRECTION_SELECTION: ("language", "level", "category"),
    View.FLASHCARDS: ("language", "level", "category", "direction"),
    View.BLOCK_SUMMARY: ("language", "level", "category", "direction"),
}


@dataclass
class Navigator:
    view: View = View.LANGUAGE_SELECTION
    language: Optional[Language] = None
    level: Optional[Level] = None
    category: Optional[WordCategory] = None
    direction: Optional[TranslationDirection] = None

    def missing(self, view: View) -> list[str]:
        return [name for name in _REQUIRES[view] if getattr(self, name) is None]

    def show(self, view: View) -> View:
        """Move to ``view``, or back to the start if its selections are missing."""
        missing = self.missing(view)
        if missing:
            logger.warning(
                f"Cannot show {view.value} without {', '.join(missing)}; resetting"
            )
            self.reset()
            return self.view
        self.view = view
        return view

    def reset(self) -> None:
        self.view = View.LANGUAGE_SELECTION
        self.language = None
        self.level = None
        self.category = None
        self.direction = None

    # Selections -----------------------------------------------------------
    def select_language(self, language: Language) -> View:
        self.language = Language(language)
        self.level = None
        self.category = None
        self.direction = None
        return self.show(View.LEVEL_SELECTION)

    def select_level(self, level: Level) -> View:
        self.level = Level(level)
        self.direction = None
        if self.level == Level.CUSTOM:
            self.category = WordCategory.CUSTOM
            return self.show(View.CUSTOM_WORDS_MANAGEMENT)
        self.category = None
        return self.show(View.CATEGORY_SELECTION)

    def select_category(self, category: WordCategory) -> View:
        self.category = WordCategory(category)
        return self.show(View.DIRECTION_SELECTION)

    def start_custom(self) -> View:
        return self.show(View.DIRECTION_SELECTION)

    def select_direction(self, direction: TranslationDirection) -> View:
        self.direction = TranslationDirection(direction)
        return self.show(View.FLASHCARDS)

    def finish_block(self) -> View:
        return self.show(View.BLOCK_SUMMARY)

    def continue_block(self) -> View:
        return self.show(View.FLASHCARDS)

    def review(self) -> View:
        return self.show(View.REVIEW)

    @property
    def is_custom(self) -> bool:
        return self.level == Level.CUSTOM
