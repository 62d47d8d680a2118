"""Pydantic models describing study sessions.

Mirrors the words module: simple schemas used by the session manager, the API
handlers and the CLI.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from flashdeck.modules.study.engine import PassPolicy, SessionPhase
from flashdeck.modules.words.models import (
    Card,
    Language,
    Level,
    TranslationDirection,
    Word,
    WordCategory,
)


class SessionMode(str, Enum):
    GENERATED = "generated"
    CUSTOM = "custom"
    REVIEW = "review"


class SessionState(BaseModel):
    id: str
    mode: SessionMode
    policy: PassPolicy
    language: Language
    direction: TranslationDirection
    level: Optional[Level] = None
    category: Optional[WordCategory] = None

    phase: SessionPhase
    pass_number: int = 1
    current_index: int = 0
    total: int = 0
    card: Optional[Card] = None
    is_flipped: bool = False
    # Accumulators of the current (or final) pass
    known: list[Word] = Field(default_factory=list)
    unknown: list[Word] = Field(default_factory=list)

    block_index: int = 0
    block_count: int = 1
    has_more_blocks: bool = False

    finished: bool = False
    parent_id: Optional[str] = None
    created_at: str


class SessionSummary(BaseModel):
    id: str
    mode: SessionMode
    language: Language
    finished: bool
    created_at: str
