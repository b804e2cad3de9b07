"""Adapter wiring a Session's key dispatch and events into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from modal_motion.buffer import BufferMirror
from modal_motion.modes import CursorStyle, KeyInput, ModeResult
from modal_motion.session import Session

_FORWARDED_EVENTS = (
    "mode.activate",
    "mode.deactivate",
    "motion.moved",
    "motion.error",
    "prompt.open",
    "prompt.close",
)


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    update_cursor: Callable[[CursorStyle], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


class TextualMotionAdapter:
    """Bridges a Session to a Textual-friendly surface."""

    def __init__(self, session: Session, hooks: TextualUIHooks) -> None:
        self.session = session
        self.hooks = hooks
        self._subscribe_events()
        session.appearance.subscribe(self.hooks.update_cursor)
        self._refresh_buffer()
        self.hooks.update_cursor(session.appearance.style)

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> ModeResult:
        """Translate a Textual key event into a KeyInput and dispatch it."""

        normalized = tuple(str(mod).lower() for mod in modifiers)
        self._log_state("key ->", key=key, text=text, mods=normalized)
        result = self.session.handle_key(
            KeyInput(key=key, text=text, modifiers=normalized)
        )
        status = result.message or result.status
        if status:
            self.hooks.update_status(status)
        self._refresh_buffer()
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            command=result.command.value if result.command else None,
            position=result.position,
        )
        return result

    def focus_changed(self) -> None:
        """Host window regained focus: repaint the cursor for the mode state."""

        self.session.controller.refresh_cursor()

    def _subscribe_events(self) -> None:
        for event in _FORWARDED_EVENTS:
            self.session.bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)
        if name.startswith("mode."):
            self.hooks.update_status(self.session.mode_state.value)

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(
            self.session.buffer.mirror(
                attributes={"mode": self.session.mode_state.value}
            )
        )

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {
            "session": self.session.name,
            "mode": self.session.mode_state.value,
            "layers": self.session.stack.names(),
            "cursor": self.session.buffer.position(),
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


__all__ = ["TextualMotionAdapter", "TextualUIHooks"]
