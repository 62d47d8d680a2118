import logging
import os
from enum import Enum
from typing import Any, Optional, Union


DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | "
    "session=%(session_id)s lang=%(language)s | %(message)s"
)

# Record attributes every formatter may reference
CONTEXT_FIELDS = ("session_id", "language")


class ContextFilter(logging.Filter):
    """Fills missing context fields with '-' so the format string never breaks."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        for name in CONTEXT_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, "-")
        return True


def log_extra(
    session_id: Optional[str] = None,
    language: Union[Enum, str, None] = None,
) -> dict[str, Any]:
    """Build the ``extra`` mapping for a log call; enums are logged by value."""
    extra: dict[str, Any] = {}
    if session_id:
        extra["session_id"] = session_id
    if language is not None:
        extra["language"] = language.value if isinstance(language, Enum) else language
    return extra


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Initialize root logger with the context-aware formatter."""
    resolved_level = getattr(logging, (level or DEFAULT_LEVEL).upper(), logging.INFO)
    formatter = logging.Formatter(fmt or DEFAULT_FORMAT)

    root = logging.getLogger()
    root.setLevel(resolved_level)

    # Replace our own handler on re-init (uvicorn reload, repeated create_app)
    for h in list(root.handlers):
        if getattr(h, "_flashdeck", False):
            root.removeHandler(h)

    handler = logging.StreamHandler()
    handler._flashdeck = True  # type: ignore[attr-defined]
    handler.setFormatter(formatter)
    handler.addFilter(ContextFilter())
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger; ensure root is initialized."""
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
