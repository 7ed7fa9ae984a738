"""
Decoding engine for Byfl binary table streams.
"""

from .events import EVENT_NAMES, HANDLER_SET_SIZE, BfbinHandler, EventDispatcher
from .session import ParseSession, decode
from .walker import GrammarWalker, WalkStats

__all__ = [
    "EVENT_NAMES",
    "HANDLER_SET_SIZE",
    "BfbinHandler",
    "EventDispatcher",
    "GrammarWalker",
    "ParseSession",
    "WalkStats",
    "decode",
]
