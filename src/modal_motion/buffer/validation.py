"""Validation helpers shared across buffer services."""

from __future__ import annotations

from .document import BufferDocument
from .state import Offset
from .sync import BufferValidationError


def ensure_offset(document: BufferDocument, offset: Offset) -> Offset:
    if not isinstance(offset, int) or isinstance(offset, bool):
        raise BufferValidationError("Offset must be an integer", offset=offset)
    if offset < 0 or offset > document.length:
        raise BufferValidationError(
            f"Offset {offset} outside [0, {document.length}]", offset=offset
        )
    return offset


def clamp_offset(document: BufferDocument, offset: Offset) -> Offset:
    return max(0, min(offset, document.length))
