"""Cursor motions: character search and bracket navigation."""

from modal_motion.buffer import Direction

from .brackets import OPENER_FAMILIES, BracketNavigator
from .char_search import CharSearchEngine, SearchMemory
from .errors import MotionError, NoPriorSearch, SearchNotFound, UnbalancedDelimiter

__all__ = [
    "BracketNavigator",
    "CharSearchEngine",
    "Direction",
    "MotionError",
    "NoPriorSearch",
    "OPENER_FAMILIES",
    "SearchMemory",
    "SearchNotFound",
    "UnbalancedDelimiter",
]
