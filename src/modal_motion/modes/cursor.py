"""Cursor appearance shared between the controller and the host."""

from __future__ import annotations

from enum import Enum
from typing import Callable, List, Optional


class CursorStyle(Enum):
    BOX = "box"
    BAR = "bar"
    HBAR = "hbar"
    HOLLOW = "hollow"

    @classmethod
    def parse(cls, value: "CursorStyle | str") -> "CursorStyle":
        if isinstance(value, CursorStyle):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unknown cursor style '{value}'") from exc


StyleListener = Callable[[CursorStyle], None]


class CursorAppearance:
    """Current cursor style of one session; hosts subscribe to redraw it."""

    def __init__(self, style: CursorStyle = CursorStyle.BAR) -> None:
        self._style = style
        self._listeners: List[StyleListener] = []

    @property
    def style(self) -> CursorStyle:
        return self._style

    def subscribe(self, listener: StyleListener) -> None:
        self._listeners.append(listener)

    def apply(
        self, style: CursorStyle, *, notify: bool = True
    ) -> Optional[CursorStyle]:
        """Set ``style`` and return the previous one, or ``None`` if unchanged.

        Listeners run even when the style is unchanged so a refresh after a
        focus change repaints the frontmost cursor.
        """

        previous = self._style
        self._style = style
        if notify:
            for listener in list(self._listeners):
                listener(style)
        return previous if previous is not style else None


__all__ = ["CursorStyle", "CursorAppearance", "StyleListener"]
