"""Adapter boundary types for mirroring buffers into host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, Tuple

from .state import Offset, Selection


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state."""

    text: str
    cursor: Offset
    row_col: Tuple[int, int]
    selection: Optional[Selection]
    attributes: dict[str, str] = field(default_factory=dict)


class BufferSync(Protocol):
    """How adapters pull buffer snapshots for display."""

    def pull_buffer(self) -> BufferMirror:
        """Return the latest buffer snapshot that the host should render."""
        ...


class BufferValidationError(RuntimeError):
    """Raised when a caller supplies an offset outside the buffer."""

    def __init__(self, message: str, *, offset: Offset | None = None) -> None:
        super().__init__(message)
        self.offset = offset
