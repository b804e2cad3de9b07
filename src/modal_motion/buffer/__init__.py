"""Buffer cursor model used by every motion."""

from .buffer import Buffer, CharPredicate
from .document import BufferDocument
from .state import BufferState, Direction, Offset, Selection
from .sync import BufferMirror, BufferSync, BufferValidationError
from .validation import clamp_offset, ensure_offset

__all__ = [
    "Buffer",
    "BufferDocument",
    "BufferMirror",
    "BufferState",
    "BufferSync",
    "BufferValidationError",
    "CharPredicate",
    "Direction",
    "Offset",
    "Selection",
    "clamp_offset",
    "ensure_offset",
]
