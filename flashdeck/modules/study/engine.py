"""Flashcard pass state machine.

A session walks a deck one card at a time. Judging a card reveals its back
for ``reveal_delay`` seconds; the card then turns back and, after
``flip_back_delay``, the next card is presented. Delays are scheduled on an
``EventQueue`` so nothing here sleeps.

Two completion policies:

* ``SINGLE_PASS``: the first completed pass ends the session.
* ``CONVERGENT``: every pass that leaves unknown words starts another pass over
  those words (shuffled). The session ends on the first pass with no unknowns;
  its known words are the ones confirmed for removal from the review list.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Sequence

from flashdeck.modules.study.scheduler import EventQueue, Timer
from flashdeck.modules.words.models import Word

REVEAL_DELAY_SEC = 2.0
FLIP_BACK_DELAY_SEC = 0.25


class SessionPhase(str, Enum):
    PRESENTING = "presenting"
    FLIPPED = "flipped"
    PASS_COMPLETE = "pass_complete"


class PassPolicy(str, Enum):
    SINGLE_PASS = "single_pass"
    CONVERGENT = "convergent"


@dataclass
class PassResult:
    number: int
    known: list[Word] = field(default_factory=list)
    unknown: list[Word] = field(default_factory=list)


@dataclass
class SessionResult:
    known: list[Word]
    unknown: list[Word]
    passes: list[PassResult] = field(default_factory=list)


class SessionEngine:
    def __init__(
        self,
        deck: Sequence[Word],
        *,
        scheduler: EventQueue,
        policy: PassPolicy = PassPolicy.SINGLE_PASS,
        reveal_delay: float = REVEAL_DELAY_SEC,
        flip_back_delay: float = FLIP_BACK_DELAY_SEC,
        rng: Optional[random.Random] = None,
        on_pass_complete: Optional[Callable[[PassResult], None]] = None,
        on_finish: Optional[Callable[[SessionResult], None]] = None,
    ) -> None:
        self.scheduler = scheduler
        self.policy = PassPolicy(policy)
        self.reveal_delay = reveal_delay
        self.flip_back_delay = flip_back_delay
        self.rng = rng or random.Random()
        self.on_pass_complete = on_pass_complete
        self.on_finish = on_finish

        self.deck: list[Word] = list(deck)
        self.current_index = 0
        self.is_flipped = False
        self.phase = SessionPhase.PRESENTING
        self.known: list[Word] = []
        self.unknown: list[Word] = []
        self.passes: list[PassResult] = []
        self.result: Optional[SessionResult] = None
        self._started = False
        self._timer: Optional[Timer] = None

    # State ----------------------------------------------------------------
    @property
    def pass_number(self) -> int:
        return len(self.passes) + (0 if self.finished else 1)

    @property
    def finished(self) -> bool:
        return self.result is not None

    @property
    def current_word(self) -> Optional[Word]:
        if self.phase == SessionPhase.PASS_COMPLETE or not self.deck:
            return None
        return self.deck[self.current_index]

    # Lifecycle ------------------------------------------------------------
    def start(self) -> None:
        if self._started:
            return
        self._started = True
        self._begin_pass(self.deck)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _begin_pass(self, deck: list[Word]) -> None:
        self.deck = deck
        self.current_index = 0
        self.is_flipped = False
        self.known = []
        self.unknown = []
        if not deck:
            self._complete_pass()
            return
        self.phase = SessionPhase.PRESENTING

    # User actions ---------------------------------------------------------
    def judge(self, known: bool) -> bool:
        """Record the current card; ignored unless a card is being presented."""
        if not self._started or self.phase != SessionPhase.PRESENTING:
            return False
        word = self.deck[self.current_index]
        (self.known if known else self.unknown).append(word)
        self.phase = SessionPhase.FLIPPED
        self.is_flipped = True
        self._timer = self.scheduler.call_later(self.reveal_delay, self._after_reveal)
        return True

    def flip(self) -> bool:
        """Peek at the other side; only while no judgement is pending."""
        if not self._started or self.phase != SessionPhase.PRESENTING:
            return False
        self.is_flipped = not self.is_flipped
        return True

    # Scheduled transitions ------------------------------------------------
    def _after_reveal(self) -> None:
        if self.current_index + 1 < len(self.deck):
            self.is_flipped = False
            self._timer = self.scheduler.call_later(self.flip_back_delay, self._advance)
        else:
            self._timer = None
            self._complete_pass()

    def _advance(self) -> None:
        self._timer = None
        self.current_index += 1
        self.phase = SessionPhase.PRESENTING

    def _complete_pass(self) -> None:
        self.current_index = len(self.deck)
        self.phase = SessionPhase.PASS_COMPLETE
        result = PassResult(
            number=len(self.passes) + 1,
            known=list(self.known),
            unknown=list(self.unknown),
        )
        self.passes.append(result)
        if self.on_pass_complete is not None:
            self.on_pass_complete(result)

        if self.policy == PassPolicy.CONVERGENT and result.unknown:
            next_deck = list(result.unknown)
            self.rng.shuffle(next_deck)
            self._begin_pass(next_deck)
            return

        if self.policy == PassPolicy.CONVERGENT:
            self.result = SessionResult(known=result.known, unknown=[], passes=self.passes)
        else:
            self.result = SessionResult(
                known=result.known, unknown=result.unknown, passes=self.passes
            )
        if self.on_finish is not None:
            self.on_finish(self.result)
