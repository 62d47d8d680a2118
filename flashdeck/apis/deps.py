from __future__ import annotations

from functools import lru_cache

from flashdeck.core.config import settings
from flashdeck.modules.study.manager import SessionManager
from flashdeck.modules.words.store import (
    KeyValueBackend,
    WordStore,
    build_backend,
    custom_words_store,
    unknown_words_store,
)


@lru_cache
def get_backend() -> KeyValueBackend:
    return build_backend(settings.storage)


def get_unknown_store() -> WordStore:
    return unknown_words_store(get_backend(), prefix=settings.storage.key_prefix)


def get_custom_store() -> WordStore:
    return custom_words_store(get_backend(), prefix=settings.storage.key_prefix)


@lru_cache
def get_session_manager() -> SessionManager:
    """Process-wide manager; sessions live in memory only."""
    return SessionManager(
        unknown_store=get_unknown_store(),
        custom_store=get_custom_store(),
        block_size=settings.study.block_size,
        reveal_delay=settings.study.reveal_delay_sec,
        flip_back_delay=settings.study.flip_back_delay_sec,
    )
