"""
Tests for bulk import of "word, translation" lines.
"""

import pytest

from flashdeck.modules.words.importer import BulkImportError, parse_bulk_words
from flashdeck.modules.words.models import Word


def test_mixed_separators_and_bad_line() -> None:
    words = parse_bulk_words("gato,cat\nperro-dog\nbad line")
    assert words == [
        Word(word="gato", translation="cat"),
        Word(word="perro", translation="dog"),
    ]


def test_fields_are_trimmed_and_blank_lines_skipped() -> None:
    text = "\n   casa ;  dom  \n\n\t\nmesa,stół\n"
    assert parse_bulk_words(text) == [
        Word(word="casa", translation="dom"),
        Word(word="mesa", translation="stół"),
    ]


@pytest.mark.parametrize(
    "line",
    [
        "one,two,three",
        "empty,",
        ",empty",
        "a-b;c",
        "no separator here",
    ],
)
def test_lines_without_exactly_two_fields_are_discarded(line: str) -> None:
    words = parse_bulk_words(f"{line}\nok,fine")
    assert words == [Word(word="ok", translation="fine")]


def test_all_invalid_lines_raise() -> None:
    with pytest.raises(BulkImportError):
        parse_bulk_words("bad line\nanother bad line")


def test_empty_text_raises() -> None:
    with pytest.raises(BulkImportError):
        parse_bulk_words("   \n\n")


def test_custom_separators() -> None:
    # Hyphenated words survive when the hyphen is not a separator
    words = parse_bulk_words("well-known|znany\nx,y", separators="|")
    assert words == [Word(word="well-known", translation="znany")]


def test_bulk_import_error_is_value_error() -> None:
    assert issubclass(BulkImportError, ValueError)
