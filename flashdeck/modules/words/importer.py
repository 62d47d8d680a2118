"""Bulk import of user-authored words from freeform text."""

from __future__ import annotations

import re

from flashdeck.modules.words.models import Word

DEFAULT_SEPARATORS = ",;-"


class BulkImportError(ValueError):
    """Raised when an import text contains no valid word pairs."""


def parse_bulk_words(text: str, separators: str = DEFAULT_SEPARATORS) -> list[Word]:
    """Parse one ``word<sep>translation`` pair per line.

    Lines are split on any single separator character. A line is kept only if
    it yields exactly two non-empty trimmed fields; everything else is
    discarded. If nothing survives, the whole import is rejected.
    """
    if not separators:
        raise ValueError("at least one separator is required")
    splitter = re.compile(f"[{re.escape(separators)}]")

    words: list[Word] = []
    for line in (text or "").splitlines():
        if not line.strip():
            continue
        parts = [p.strip() for p in splitter.split(line)]
        if len(parts) == 2 and parts[0] and parts[1]:
            words.append(Word(word=parts[0], translation=parts[1]))

    if not words:
        raise BulkImportError(
            'No valid "word, translation" pairs found. '
            "Use one pair per line, e.g. word,translation"
        )
    return words
