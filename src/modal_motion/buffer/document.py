"""Character storage backing a buffer session."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple


def _line_starts(text: str) -> List[int]:
    starts = [0]
    for index, char in enumerate(text):
        if char == "\n":
            starts.append(index + 1)
    return starts


@dataclass(slots=True)
class BufferDocument:
    """Flat text plus a line-start index.

    Offsets address characters directly; ``len(text)`` is the one-past-end
    position. Line boundaries are derived from the cached index so motions
    that are line-bounded do not rescan the whole text.
    """

    text: str = ""
    version: int = 0
    _starts: List[int] = field(default_factory=lambda: [0], init=False, repr=False)

    def __post_init__(self) -> None:
        self._starts = _line_starts(self.text)

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls(text=text)

    def replace(self, text: str) -> "BufferDocument":
        """Return a new document holding ``text`` with a bumped version."""

        return BufferDocument(text=text, version=self.version + 1)

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def char_at(self, offset: int) -> Optional[str]:
        if 0 <= offset < len(self.text):
            return self.text[offset]
        return None

    def line_index(self, offset: int) -> int:
        return bisect_right(self._starts, offset) - 1

    def line_bounds(self, offset: int) -> Tuple[int, int]:
        """``(start, end)`` of the line holding ``offset``, newline excluded."""

        row = self.line_index(offset)
        start = self._starts[row]
        if row + 1 < len(self._starts):
            return start, self._starts[row + 1] - 1
        return start, len(self.text)

    def row_col(self, offset: int) -> Tuple[int, int]:
        row = self.line_index(offset)
        return row, offset - self._starts[row]

    def lines(self) -> Sequence[str]:
        return tuple(self.text.split("\n"))
