from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from flashdeck.modules.study.models import SessionMode, SessionState
from flashdeck.modules.words.models import (
    Language,
    Level,
    TranslationDirection,
    WordCategory,
)


class CreateSessionRequest(BaseModel):
    mode: SessionMode = SessionMode.GENERATED
    language: Language
    direction: TranslationDirection = TranslationDirection.FOREIGN_TO_NATIVE
    level: Optional[Level] = Field(
        default=None, description="Required for generated sessions"
    )
    category: Optional[WordCategory] = None


class JudgeRequest(BaseModel):
    known: bool


class SessionStateResponse(BaseModel):
    state: SessionState
