"""
Shared fixtures for the flashdeck test suite.
Stores run on the in-memory backend and timers on a manual clock, so no test
touches the network, the disk (unless it asks for tmp_path) or real time.
"""

import os

os.environ.setdefault("STORAGE_BACKEND", "memory")

import random
from typing import Any, Callable, Generator, Optional

import pytest

from flashdeck.modules.study.manager import SessionManager
from flashdeck.modules.study.scheduler import EventQueue
from flashdeck.modules.words.models import Language, Level, Word, WordCategory
from flashdeck.modules.words.store import (
    MemoryBackend,
    WordStore,
    custom_words_store,
    unknown_words_store,
)


class ManualClock:
    """Clock that only moves when a test advances it."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def settle(queue: EventQueue, clock: ManualClock) -> None:
    """Fire every pending timer, jumping the clock to each due time in turn."""
    while True:
        due = queue.next_due()
        if due is None:
            return
        clock.now = max(clock.now, due)
        queue.run_due()


def make_words(n: int, prefix: str = "w") -> list[Word]:
    return [Word(word=f"{prefix}{i}", translation=f"t{i}") for i in range(n)]


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def queue(clock: ManualClock) -> EventQueue:
    return EventQueue(clock=clock)


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def unknown_store(backend: MemoryBackend) -> WordStore:
    return unknown_words_store(backend)


@pytest.fixture
def custom_store(backend: MemoryBackend) -> WordStore:
    return custom_words_store(backend)


class FakeWordSource:
    """Stands in for the LLM-backed generator and records its calls."""

    def __init__(self, words: Optional[list[Word]] = None) -> None:
        self.words = words if words is not None else make_words(30)
        self.calls: list[tuple[Any, Any, Any]] = []

    async def __call__(
        self, language: Language, level: Level, category: Optional[WordCategory]
    ) -> list[Word]:
        self.calls.append((language, level, category))
        return list(self.words)


@pytest.fixture
def word_source() -> FakeWordSource:
    return FakeWordSource()


@pytest.fixture
def manager(
    unknown_store: WordStore,
    custom_store: WordStore,
    queue: EventQueue,
    word_source: FakeWordSource,
) -> SessionManager:
    return SessionManager(
        unknown_store=unknown_store,
        custom_store=custom_store,
        scheduler=queue,
        word_source=word_source,
        block_size=25,
        rng=random.Random(7),
    )


@pytest.fixture
def api_client(
    unknown_store: WordStore,
    custom_store: WordStore,
    word_source: FakeWordSource,
    clock: ManualClock,
) -> Generator[Any, None, None]:
    """TestClient with stores and a zero-delay session manager injected."""
    from fastapi.testclient import TestClient

    from flashdeck.apis.deps import (
        get_custom_store,
        get_session_manager,
        get_unknown_store,
    )
    from main import create_app

    app = create_app()
    session_manager = SessionManager(
        unknown_store=unknown_store,
        custom_store=custom_store,
        scheduler=EventQueue(clock=clock),
        word_source=word_source,
        block_size=25,
        reveal_delay=0,
        flip_back_delay=0,
        rng=random.Random(7),
    )
    app.dependency_overrides[get_unknown_store] = lambda: unknown_store
    app.dependency_overrides[get_custom_store] = lambda: custom_store
    app.dependency_overrides[get_session_manager] = lambda: session_manager
    client = TestClient(app)
    client.session_manager = session_manager  # type: ignore[attr-defined]
    yield client
    app.dependency_overrides.clear()
