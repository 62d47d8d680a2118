"""Per-language word list persistence over a pluggable key/value backend.

Each list lives under one key (``<prefix><kind>_<language>``) as a JSON array
of ``{word, translation}`` objects. Reads and writes never raise to the
caller: unreadable data is treated as an empty list and failed writes are
dropped, both logged.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Callable, Iterable, Optional, Protocol

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import select

from flashdeck.core.config import StorageSettings
from flashdeck.core.db.base import Base, make_engine, make_session_factory, session_scope
from flashdeck.core.db.schemas.storage import StoredItem
from flashdeck.core.logging import get_logger, log_extra
from flashdeck.modules.words.models import Language, Word

logger = get_logger(__name__)

_WORDS = TypeAdapter(list[Word])

UNKNOWN_WORDS_KIND = "unknown_words"
CUSTOM_WORDS_KIND = "custom_words"

KeyFunc = Callable[[Word], str]


def exact_key(word: Word) -> str:
    return word.word


def casefold_key(word: Word) -> str:
    return word.word.strip().casefold()


class KeyValueBackend(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryBackend:
    """Process-local dict; contents vanish with the process."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileBackend:
    """All keys in a single JSON object on disk, rewritten atomically."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data

    def _load_for_write(self) -> dict[str, str]:
        """Like ``_load`` but an unreadable file is set aside and replaced."""
        try:
            return self._load()
        except ValueError as e:
            corrupt = self.path.with_name(self.path.name + ".corrupt")
            logger.error(f"Moving unreadable store {self.path} to {corrupt}: {e}")
            os.replace(self.path, corrupt)
            return {}

    def _dump(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load_for_write()
        data[key] = value
        self._dump(data)

    def remove_item(self, key: str) -> None:
        data = self._load_for_write()
        if data.pop(key, None) is not None:
            self._dump(data)


class SqlBackend:
    """Key/value rows in the ``stored_items`` table (SQLite by default)."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.engine = make_engine(url, echo=echo)
        Base.metadata.create_all(self.engine)
        self._sessions = make_session_factory(self.engine)

    def get_item(self, key: str) -> Optional[str]:
        with self._sessions() as session:
            return session.execute(
                select(StoredItem.value).where(StoredItem.key == key)
            ).scalar_one_or_none()

    def set_item(self, key: str, value: str) -> None:
        with session_scope(self._sessions) as session:
            item = session.get(StoredItem, key)
            if item is None:
                session.add(StoredItem(key=key, value=value))
            else:
                item.value = value

    def remove_item(self, key: str) -> None:
        with session_scope(self._sessions) as session:
            item = session.get(StoredItem, key)
            if item is not None:
                session.delete(item)


def build_backend(storage: StorageSettings) -> KeyValueBackend:
    if storage.backend == "memory":
        return MemoryBackend()
    if storage.backend == "sql":
        return SqlBackend(storage.db_url)
    return JsonFileBackend(storage.path)


def dedupe(words: Iterable[Word], key: KeyFunc) -> list[Word]:
    """Last write wins per key; the first occurrence keeps its position."""
    unique: dict[str, Word] = {}
    for w in words:
        unique[key(w)] = w
    return list(unique.values())


class WordStore:
    """One kind of word list (unknown or custom) for every language."""

    def __init__(
        self,
        backend: KeyValueBackend,
        *,
        kind: str,
        key: KeyFunc = exact_key,
        prefix: str = "flashdeck_",
    ) -> None:
        self.backend = backend
        self.kind = kind
        self.key = key
        self.prefix = prefix

    def storage_key(self, language: Language) -> str:
        return f"{self.prefix}{self.kind}_{Language(language).value}"

    def get(self, language: Language) -> list[Word]:
        storage_key = self.storage_key(language)
        try:
            raw = self.backend.get_item(storage_key)
            if not raw:
                return []
            return _WORDS.validate_json(raw)
        except (ValidationError, ValueError) as e:
            logger.error(
                f"Discarding unreadable word list {storage_key}: {e}",
                extra=log_extra(language=language),
            )
            return []
        except Exception:
            logger.exception(
                f"Failed to read word list {storage_key}",
                extra=log_extra(language=language),
            )
            return []

    def set(self, language: Language, words: Iterable[Word]) -> list[Word]:
        unique = dedupe(words, self.key)
        storage_key = self.storage_key(language)
        try:
            self.backend.set_item(storage_key, _WORDS.dump_json(unique).decode("utf-8"))
        except Exception:
            logger.exception(
                f"Failed to write word list {storage_key}",
                extra=log_extra(language=language),
            )
        return unique

    def add(self, language: Language, new_words: Iterable[Word]) -> list[Word]:
        return self.set(language, [*self.get(language), *new_words])

    def remove_known(self, language: Language, words: Iterable[Word]) -> list[Word]:
        drop = {self.key(w) for w in words}
        return self.set(
            language, [w for w in self.get(language) if self.key(w) not in drop]
        )

    def delete(self, language: Language, word: str) -> list[Word]:
        """Remove the entry whose key matches the surface form ``word``."""
        target = self.key(Word(word=word, translation=""))
        return self.set(
            language, [w for w in self.get(language) if self.key(w) != target]
        )

    def clear(self, language: Language) -> None:
        try:
            self.backend.remove_item(self.storage_key(language))
        except Exception:
            logger.exception(f"Failed to clear word list {self.storage_key(language)}")


def unknown_words_store(backend: KeyValueBackend, *, prefix: str = "flashdeck_") -> WordStore:
    # Review lists match surface forms exactly
    return WordStore(backend, kind=UNKNOWN_WORDS_KIND, key=exact_key, prefix=prefix)


def custom_words_store(backend: KeyValueBackend, *, prefix: str = "flashdeck_") -> WordStore:
    return WordStore(backend, kind=CUSTOM_WORDS_KIND, key=casefold_key, prefix=prefix)
