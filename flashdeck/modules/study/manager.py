"""In-memory study session manager.

Sessions are kept in-process only. Every session owns a ``SessionEngine``;
all engines share one ``EventQueue`` which is drained whenever the manager is
touched, so reveal/advance timers fire lazily in due order. When a session
finishes its outcome is written to the word stores: single-pass sessions add
their unknown words to the review list, review sessions remove the words they
confirmed as known.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional, Sequence
from uuid import uuid4

from flashdeck.core.logging import get_logger, log_extra
from flashdeck.modules.study.chunking import (
    DEFAULT_BLOCK_SIZE,
    block_count,
    get_block,
    has_more_blocks,
)
from flashdeck.modules.study.engine import (
    FLIP_BACK_DELAY_SEC,
    REVEAL_DELAY_SEC,
    PassPolicy,
    SessionEngine,
    SessionResult,
)
from flashdeck.modules.study.models import SessionMode, SessionState, SessionSummary
from flashdeck.modules.study.scheduler import EventQueue
from flashdeck.modules.words.models import (
    Card,
    Language,
    Level,
    TranslationDirection,
    Word,
    WordCategory,
)
from flashdeck.modules.words.source import generate_words
from flashdeck.modules.words.store import WordStore

logger = get_logger(__name__)

WordSource = Callable[
    [Language, Level, Optional[WordCategory]], Awaitable[list[Word]]
]


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _iso(dt: Optional[datetime]) -> Optional[str]:
    if not dt:
        return None
    return dt.isoformat().replace("+00:00", "Z")


def _short_id() -> str:
    # 8-char slice from uuid4
    return uuid4().hex[:8]


@dataclass
class StudySession:
    id: str
    mode: SessionMode
    language: Language
    direction: TranslationDirection
    engine: SessionEngine
    level: Optional[Level] = None
    category: Optional[WordCategory] = None
    # Full generated list; blocks are sliced from it
    words: list[Word] = field(default_factory=list)
    block_index: int = 0
    block_size: int = DEFAULT_BLOCK_SIZE
    parent_id: Optional[str] = None
    created_at: datetime = field(default_factory=_now_utc)
    last_activity: datetime = field(default_factory=_now_utc)

    @property
    def finished(self) -> bool:
        return self.engine.finished

    @property
    def result(self) -> Optional[SessionResult]:
        return self.engine.result

    @property
    def paginated(self) -> bool:
        return self.mode == SessionMode.GENERATED

    @property
    def has_more_blocks(self) -> bool:
        if not self.paginated:
            return False
        return has_more_blocks(self.block_index, len(self.words), self.block_size)

    def to_state(self) -> SessionState:
        engine = self.engine
        word = engine.current_word
        return SessionState(
            id=self.id,
            mode=self.mode,
            policy=engine.policy,
            language=self.language,
            direction=self.direction,
            level=self.level,
            category=self.category,
            phase=engine.phase,
            pass_number=engine.pass_number,
            current_index=engine.current_index,
            total=len(engine.deck),
            card=Card.from_word(word, self.direction) if word else None,
            is_flipped=engine.is_flipped,
            known=list(engine.known),
            unknown=list(engine.unknown),
            block_index=self.block_index,
            block_count=(
                max(1, block_count(len(self.words), self.block_size))
                if self.paginated
                else 1
            ),
            has_more_blocks=self.has_more_blocks,
            finished=self.finished,
            parent_id=self.parent_id,
            created_at=_iso(self.created_at) or "",
        )

    def to_summary(self) -> SessionSummary:
        return SessionSummary(
            id=self.id,
            mode=self.mode,
            language=self.language,
            finished=self.finished,
            created_at=_iso(self.created_at) or "",
        )


class SessionManager:
    def __init__(
        self,
        *,
        unknown_store: WordStore,
        custom_store: WordStore,
        scheduler: Optional[EventQueue] = None,
        word_source: WordSource = generate_words,
        block_size: int = DEFAULT_BLOCK_SIZE,
        reveal_delay: float = REVEAL_DELAY_SEC,
        flip_back_delay: float = FLIP_BACK_DELAY_SEC,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.unknown_store = unknown_store
        self.custom_store = custom_store
        self.scheduler = scheduler or EventQueue()
        self.word_source = word_source
        self.block_size = block_size
        self.reveal_delay = reveal_delay
        self.flip_back_delay = flip_back_delay
        self.rng = rng or random.Random()
        self.sessions: dict[str, StudySession] = {}
        self._cleanup_task: Optional[asyncio.Task] = None
        self._idle_seconds: int = 3600
        self._sweep_interval: int = 60

    # Session lifecycle --------------------------------------------------
    async def create_session(
        self,
        *,
        mode: SessionMode,
        language: Language,
        direction: TranslationDirection,
        level: Optional[Level] = None,
        category: Optional[WordCategory] = None,
        words: Optional[Sequence[Word]] = None,
    ) -> StudySession:
        """Start a session of any mode; picking the custom level means custom mode."""
        mode = SessionMode(mode)
        if mode == SessionMode.GENERATED and level is not None and Level(level) == Level.CUSTOM:
            mode = SessionMode.CUSTOM
        if mode == SessionMode.GENERATED:
            if level is None:
                raise ValueError("level_required")
            return await self.start_generated(
                language=language, level=level, category=category, direction=direction
            )
        if mode == SessionMode.CUSTOM:
            return self.start_custom(language=language, direction=direction)
        return self.start_review(language=language, direction=direction, words=words)

    async def start_generated(
        self,
        *,
        language: Language,
        level: Level,
        category: Optional[WordCategory],
        direction: TranslationDirection,
    ) -> StudySession:
        if Level(level) == Level.CUSTOM:
            raise ValueError("custom_level_not_generated")
        if category is not None and WordCategory(category) == WordCategory.CUSTOM:
            raise ValueError("custom_category_not_generated")
        words = await self.word_source(language, level, category)
        return self._open(
            mode=SessionMode.GENERATED,
            language=language,
            direction=direction,
            level=level,
            category=category,
            words=list(words),
            deck=get_block(words, 0, self.block_size) if words else [],
            policy=PassPolicy.SINGLE_PASS,
        )

    def start_custom(
        self, *, language: Language, direction: TranslationDirection
    ) -> StudySession:
        deck = self.custom_store.get(language)
        return self._open(
            mode=SessionMode.CUSTOM,
            language=language,
            direction=direction,
            level=Level.CUSTOM,
            category=WordCategory.CUSTOM,
            deck=deck,
            policy=PassPolicy.SINGLE_PASS,
        )

    def start_review(
        self,
        *,
        language: Language,
        direction: TranslationDirection,
        words: Optional[Sequence[Word]] = None,
        parent_id: Optional[str] = None,
    ) -> StudySession:
        """Convergent review over ``words`` (default: the stored unknown list)."""
        deck = list(words) if words is not None else self.unknown_store.get(language)
        self.rng.shuffle(deck)
        return self._open(
            mode=SessionMode.REVIEW,
            language=language,
            direction=direction,
            deck=deck,
            policy=PassPolicy.CONVERGENT,
            parent_id=parent_id,
        )

    def next_block(self, session_id: str) -> StudySession:
        prev = self.get_session(session_id)
        if not prev.paginated:
            raise ValueError("not_paginated")
        if not prev.finished:
            raise ValueError("session_in_progress")
        if not prev.has_more_blocks:
            raise ValueError("no_more_blocks")
        index = prev.block_index + 1
        return self._open(
            mode=SessionMode.GENERATED,
            language=prev.language,
            direction=prev.direction,
            level=prev.level,
            category=prev.category,
            words=prev.words,
            block_index=index,
            deck=get_block(prev.words, index, self.block_size),
            policy=PassPolicy.SINGLE_PASS,
            parent_id=prev.id,
        )

    def review_unknown(self, session_id: str) -> StudySession:
        """Start a review over exactly the unknown words of a finished session."""
        prev = self.get_session(session_id)
        if not prev.finished or prev.result is None:
            raise ValueError("session_in_progress")
        if not prev.result.unknown:
            raise ValueError("nothing_to_review")
        return self.start_review(
            language=prev.language,
            direction=prev.direction,
            words=prev.result.unknown,
            parent_id=prev.id,
        )

    def _open(
        self,
        *,
        mode: SessionMode,
        language: Language,
        direction: TranslationDirection,
        deck: Sequence[Word],
        policy: PassPolicy,
        level: Optional[Level] = None,
        category: Optional[WordCategory] = None,
        words: Optional[list[Word]] = None,
        block_index: int = 0,
        parent_id: Optional[str] = None,
    ) -> StudySession:
        session_id = _short_id()
        language = Language(language)
        engine = SessionEngine(
            deck,
            scheduler=self.scheduler,
            policy=policy,
            reveal_delay=self.reveal_delay,
            flip_back_delay=self.flip_back_delay,
            rng=self.rng,
            on_finish=lambda result: self._on_finish(session_id, result),
        )
        session = StudySession(
            id=session_id,
            mode=mode,
            language=language,
            direction=TranslationDirection(direction),
            engine=engine,
            level=level,
            category=category,
            words=list(words or []),
            block_index=block_index,
            block_size=self.block_size,
            parent_id=parent_id,
        )
        self.sessions[session_id] = session
        logger.info(
            f"Started {mode.value} session with {len(engine.deck)} cards",
            extra=log_extra(session_id, language),
        )
        engine.start()
        return session

    def _on_finish(self, session_id: str, result: SessionResult) -> None:
        session = self.sessions.get(session_id)
        if session is None:
            return
        extra = log_extra(session_id, session.language)
        if session.mode == SessionMode.REVIEW:
            if result.known:
                self.unknown_store.remove_known(session.language, result.known)
            logger.info(
                f"Review finished after {len(result.passes)} passes; "
                f"{len(result.known)} words mastered",
                extra=extra,
            )
            return
        if result.unknown:
            self.unknown_store.add(session.language, result.unknown)
        logger.info(
            f"Session finished: {len(result.known)} known, {len(result.unknown)} unknown",
            extra=extra,
        )

    # Lookups and actions ------------------------------------------------
    def pump(self) -> int:
        return self.scheduler.run_due()

    def get_session(self, session_id: str) -> StudySession:
        self.pump()
        session = self.sessions.get(session_id)
        if not session:
            raise ValueError("session_not_found")
        session.last_activity = _now_utc()
        return session

    def list_sessions(self) -> list[StudySession]:
        self.pump()
        return sorted(self.sessions.values(), key=lambda s: s.created_at, reverse=True)

    def judge(self, session_id: str, *, known: bool) -> StudySession:
        session = self.get_session(session_id)
        if not session.engine.judge(bool(known)):
            logger.debug(
                "Ignored judgement while no card is presented",
                extra=log_extra(session_id),
            )
        return session

    def flip(self, session_id: str) -> StudySession:
        session = self.get_session(session_id)
        session.engine.flip()
        return session

    def close_session(self, session_id: str) -> None:
        session = self.sessions.pop(session_id, None)
        if session is None:
            raise ValueError("session_not_found")
        session.engine.cancel()

    # Cleanup loop -------------------------------------------------------
    def prune(self, *, idle_seconds: Optional[int] = None) -> list[str]:
        """Drop sessions idle for longer than ``idle_seconds``."""
        limit = self._idle_seconds if idle_seconds is None else idle_seconds
        self.pump()
        now = _now_utc()
        stale = [
            sid
            for sid, s in self.sessions.items()
            if (now - s.last_activity).total_seconds() > limit
        ]
        for sid in stale:
            self.sessions.pop(sid).engine.cancel()
        return stale

    def start(self, *, idle_seconds: int = 3600, sweep_interval: int = 60) -> None:
        self._idle_seconds = max(60, int(idle_seconds))
        self._sweep_interval = max(5, int(sweep_interval))
        if self._cleanup_task and not self._cleanup_task.done():
            return
        self._cleanup_task = asyncio.create_task(self._cleanup_loop())

    async def stop(self) -> None:
        if self._cleanup_task and not self._cleanup_task.done():
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
        self._cleanup_task = None

    async def _cleanup_loop(self) -> None:
        try:
            while True:
                await asyncio.sleep(self._sweep_interval)
                pruned = self.prune()
                if pruned:
                    logger.info(f"Pruned {len(pruned)} idle sessions")
        except asyncio.CancelledError:
            return
