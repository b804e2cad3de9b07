"""Cursor, mark and search-direction state for buffers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

Offset = int
Selection = Tuple[Offset, Offset]


class Direction(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"

    @property
    def flipped(self) -> "Direction":
        if self is Direction.FORWARD:
            return Direction.BACKWARD
        return Direction.FORWARD

    @property
    def step(self) -> int:
        return 1 if self is Direction.FORWARD else -1


@dataclass(slots=True)
class BufferState:
    """Mutable cursor + mark info tied to a BufferDocument."""

    cursor: Offset = 0
    mark: Optional[Offset] = None
    case_fold: bool = False

    def set_cursor(self, offset: Offset) -> None:
        self.cursor = offset

    def set_mark(self, offset: Offset) -> None:
        self.mark = offset

    def clear_mark(self) -> None:
        self.mark = None

    @property
    def selection(self) -> Optional[Selection]:
        if self.mark is None:
            return None
        return (min(self.mark, self.cursor), max(self.mark, self.cursor))
