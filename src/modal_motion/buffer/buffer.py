"""Buffer façade: the read/seek cursor model motions operate on."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from .document import BufferDocument
from .state import BufferState, Direction, Offset, Selection
from .sync import BufferMirror
from .validation import clamp_offset, ensure_offset

CharPredicate = Callable[[str], bool]


class Buffer:
    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        ensure_offset(self.document, self.state.cursor)

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        name: str = "default",
        cursor: Offset = 0,
        case_fold: bool = False,
    ) -> "Buffer":
        return cls(
            name=name,
            document=BufferDocument.from_text(text),
            state=BufferState(cursor=cursor, case_fold=case_fold),
        )

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def length(self) -> int:
        return self.document.length

    def position(self) -> Offset:
        return self.state.cursor

    def char_at(self, offset: Offset) -> Optional[str]:
        """Character at ``offset`` or ``None`` past either end of the buffer."""

        return self.document.char_at(offset)

    def set_position(self, offset: Offset) -> Offset:
        self.state.set_cursor(ensure_offset(self.document, offset))
        return offset

    def scan(
        self,
        direction: Direction,
        predicate: CharPredicate,
        limit: Optional[Offset] = None,
        *,
        start: Optional[Offset] = None,
    ) -> Optional[Offset]:
        """Return the first offset whose character satisfies ``predicate``.

        Forward scans cover ``[start, limit)``; backward scans cover
        ``[limit, start)`` walking from ``start - 1`` down, so the character at
        ``start`` itself is never inspected going backward. ``start`` defaults
        to the cursor and ``limit`` to the corresponding buffer edge.
        """

        if start is None:
            origin = self.state.cursor
        else:
            origin = clamp_offset(self.document, start)
        text = self.document.text
        if direction is Direction.FORWARD:
            stop = self.length if limit is None else clamp_offset(self.document, limit)
            for offset in range(origin, stop):
                if predicate(text[offset]):
                    return offset
            return None

        stop = 0 if limit is None else clamp_offset(self.document, limit)
        for offset in range(origin - 1, stop - 1, -1):
            if predicate(text[offset]):
                return offset
        return None

    def line_start(self, offset: Optional[Offset] = None) -> Offset:
        return self.document.line_bounds(self._at(offset))[0]

    def line_end(self, offset: Optional[Offset] = None) -> Offset:
        return self.document.line_bounds(self._at(offset))[1]

    @property
    def case_fold(self) -> bool:
        return self.state.case_fold

    @case_fold.setter
    def case_fold(self, value: bool) -> None:
        self.state.case_fold = bool(value)

    def chars_equal(self, left: Optional[str], right: Optional[str]) -> bool:
        if left is None or right is None:
            return False
        if self.state.case_fold:
            return left.casefold() == right.casefold()
        return left == right

    @contextmanager
    def case_sensitive(self, enabled: bool = True) -> Iterator["Buffer"]:
        """Temporarily force case sensitivity, restoring the prior setting on exit."""

        previous = self.state.case_fold
        self.state.case_fold = not enabled
        try:
            yield self
        finally:
            self.state.case_fold = previous

    def set_mark(self, offset: Optional[Offset] = None) -> None:
        self.state.set_mark(ensure_offset(self.document, self._at(offset)))

    def clear_selection(self) -> None:
        self.state.clear_mark()

    def selection(self) -> Optional[Selection]:
        return self.state.selection

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        cursor = self.state.cursor
        return BufferMirror(
            text=self.document.text,
            cursor=cursor,
            row_col=self.document.row_col(cursor),
            selection=self.state.selection,
            attributes=dict(attributes or {}),
        )

    def _at(self, offset: Optional[Offset]) -> Offset:
        return self.state.cursor if offset is None else offset
