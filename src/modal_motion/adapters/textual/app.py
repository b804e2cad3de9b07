"""Executable Textual app hosting one motion session."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use modal_motion.adapters.textual.app"
    ) from exc

from modal_motion.buffer import BufferMirror
from modal_motion.modes import CursorStyle, ModeConfig
from modal_motion.runtime import telemetry
from modal_motion.session import Session
from modal_motion.syntax import preset_names, syntax_for

from .controller import TextualMotionAdapter, TextualUIHooks

SAMPLE_TEXT = """def area(shape):
    if shape["kind"] == "circle":
        return 3.14159 * (shape["r"] ** 2)
    return shape["w"] * (shape["h"] + [0][0])
"""

_CURSOR_STYLES = {
    CursorStyle.BOX: "reverse",
    CursorStyle.BAR: "underline",
    CursorStyle.HBAR: "underline",
    CursorStyle.HOLLOW: "bold",
}

_NAMED_KEYS = {
    "escape": "ESC",
    "enter": "ENTER",
    "return": "ENTER",
    "backspace": "BACKSPACE",
    "tab": "TAB",
}


@dataclass
class UIState:
    mirror: Optional[BufferMirror] = None
    cursor_style: CursorStyle = CursorStyle.BAR
    status_text: str = ""


class MotionEngineApp(App[None]):
    """Minimal Textual UI driving a motion session."""

    CSS = """
    Screen {
        layout: vertical;
    }

    #buffer-view {
        height: 1fr;
        border: round $accent;
        padding: 1 1;
        overflow: auto;
    }

    #status-line {
        height: 1;
        background: $surface-darken-1;
        padding: 0 1;
    }
    """

    BINDINGS = [("ctrl+q", "quit", "Quit")]

    def __init__(self, session: Session) -> None:
        super().__init__()
        self.session = session
        self.adapter: TextualMotionAdapter | None = None
        self._state = UIState()
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            update_cursor=self._update_cursor,
            handle_event=self._handle_event,
        )
        self.adapter = TextualMotionAdapter(self.session, hooks)

    def on_app_focus(self, event: events.AppFocus) -> None:
        del event
        if self.adapter:
            self.adapter.focus_changed()

    def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        normalized = self._normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        self.adapter.handle_textual_key(key, text=text, modifiers=modifiers)
        event.stop()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        self._state.mirror = mirror
        self._render_buffer()

    def _update_cursor(self, style: CursorStyle) -> None:
        self._state.cursor_style = style
        self._render_buffer()

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            row, col = self._state.mirror.row_col if self._state.mirror else (0, 0)
            mode = self.session.mode_state.value
            self._status_widget.update(f"[{mode}] {row + 1}:{col + 1}  {status}")

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name == "motion.error" and isinstance(payload, dict):
            self._update_status(f"{payload.get('command')}: {payload.get('status')}")

    def _render_buffer(self) -> None:
        mirror = self._state.mirror
        if mirror is None or self._buffer_widget is None:
            return
        text = Text(mirror.text + " ")
        style = _CURSOR_STYLES[self._state.cursor_style]
        text.stylize(style, mirror.cursor, mirror.cursor + 1)
        self._buffer_widget.update(text)

    @staticmethod
    def _normalize_key(
        event: events.Key,
    ) -> Optional[Tuple[str, Optional[str], Tuple[str, ...]]]:
        if event.key == "ctrl+q":
            return None
        character = event.character
        if character and len(character) == 1 and character.isprintable():
            return (character, character, ())
        *modifiers, key = event.key.split("+")
        return (_NAMED_KEYS.get(key, key), None, tuple(modifiers))


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the motion engine Textual demo.")
    parser.add_argument(
        "--text",
        default=telemetry.env("DEMO_TEXT") or SAMPLE_TEXT,
        help="Initial buffer contents",
    )
    parser.add_argument(
        "--syntax",
        choices=preset_names(),
        default="code",
        help="Syntax table used for bracket navigation (default: code)",
    )
    parser.add_argument(
        "--preset",
        default=None,
        help="Telemetry preset (development, production, performance)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.preset:
        telemetry.configure(preset=args.preset)
    session = Session.from_text(
        args.text,
        name="demo",
        syntax=syntax_for(args.syntax),
        config=ModeConfig.from_env(),
    )
    MotionEngineApp(session).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
