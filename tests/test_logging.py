"""
Tests for log context helpers.
"""

import logging

from flashdeck.core.logging import ContextFilter, log_extra, setup_logging
from flashdeck.modules.words.models import Language


def test_log_extra_uses_enum_values() -> None:
    assert log_extra("abc123", Language.SPANISH) == {
        "session_id": "abc123",
        "language": "spanish",
    }
    assert log_extra(language="english") == {"language": "english"}
    assert log_extra() == {}


def test_context_filter_fills_missing_fields() -> None:
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    record.language = "english"

    assert ContextFilter().filter(record) is True
    assert record.session_id == "-"
    assert record.language == "english"


def test_setup_logging_replaces_own_handler() -> None:
    root = logging.getLogger()
    setup_logging("debug")
    setup_logging("warning")

    ours = [h for h in root.handlers if getattr(h, "_flashdeck", False)]
    assert len(ours) == 1
    assert root.level == logging.WARNING
    setup_logging()
