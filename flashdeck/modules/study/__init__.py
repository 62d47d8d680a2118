"""Study module exports."""

from .chunking import block_count, get_block, has_more_blocks, iter_blocks
from .engine import PassPolicy, PassResult, SessionEngine, SessionPhase, SessionResult
from .manager import SessionManager, StudySession
from .models import SessionMode, SessionState
from .navigation import Navigator, View
from .scheduler import EventQueue

__all__ = [
    "block_count",
    "get_block",
    "has_more_blocks",
    "iter_blocks",
    "PassPolicy",
    "PassResult",
    "SessionEngine",
    "SessionPhase",
    "SessionResult",
    "SessionManager",
    "StudySession",
    "SessionMode",
    "SessionState",
    "Navigator",
    "View",
    "EventQueue",
]
