"""Keymap-driven layers: host default layer, overlay dispatch table, prompt."""

from __future__ import annotations

from typing import List, Optional

from modal_motion.keymaps.commands import CommandInvocation
from modal_motion.keymaps.resolver import ResolutionMatch
from modal_motion.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult, missed
from .keymap_helpers import is_printable, key_to_token, require_keymap_resolver


class KeymapLayer(Mode):
    """Resolves key chords against the keymap table named after the layer.

    Unbound keys are reported as misses so the input stack can offer them to
    the layer underneath.
    """

    name = "global"

    def __init__(self, context: ModeContext, *, name: Optional[str] = None) -> None:
        super().__init__(context)
        if name:
            self.name = name
        self.logger = telemetry.get_logger(f"modal_motion.modes.{self.name}")
        self._resolver = require_keymap_resolver(context)
        self._pending: List[str] = []

    @property
    def pending(self) -> tuple[str, ...]:
        return tuple(self._pending)

    def reset_pending(self) -> None:
        self._pending.clear()

    def on_exit(self) -> None:
        self.reset_pending()

    def handle_key(self, key: KeyInput) -> ModeResult:
        self._pending.append(key_to_token(key))
        result = self._resolver.resolve(self.name, tuple(self._pending))

        if result.status == "match" and result.match:
            self._pending.clear()
            return self._on_match(result.match, key)

        if result.status == "pending":
            return ModeResult(
                consumed=True, status="pending", message="awaiting_sequence"
            )

        self._pending.clear()
        return missed()

    def _on_match(self, match: ResolutionMatch, key: KeyInput) -> ModeResult:
        del key
        return self._execute(match, CommandInvocation(match.binding.command))

    def _execute(
        self, match: ResolutionMatch, invocation: CommandInvocation
    ) -> ModeResult:
        with telemetry.span(
            "keymaps::execute",
            component="keymaps",
            metadata={
                "layer": self.name,
                "binding_id": match.binding.id,
                "command": invocation.command.value,
                "count": invocation.count,
            },
        ):
            outcome = match.action(self.context, invocation)

        if isinstance(outcome, ModeResult):
            return outcome
        return ModeResult(consumed=True, command=invocation.command)


class OverlayLayer(KeymapLayer):
    """The overlay dispatch table installed while the mode is active.

    On top of plain chord resolution it accepts a numeric count prefix and,
    for commands that search for a character, reads the next printable key
    as the target.
    """

    name = "overlay"

    def __init__(self, context: ModeContext, *, name: Optional[str] = None) -> None:
        super().__init__(context, name=name)
        self._count_digits: List[str] = []
        self._awaiting: Optional[ResolutionMatch] = None

    @property
    def count(self) -> int:
        return int("".join(self._count_digits)) if self._count_digits else 1

    @property
    def awaiting_char(self) -> bool:
        return self._awaiting is not None

    def on_enter(self, previous: Optional[str]) -> None:
        del previous
        self.reset_pending()

    def reset_pending(self) -> None:
        super().reset_pending()
        self._count_digits.clear()
        self._awaiting = None

    def handle_key(self, key: KeyInput) -> ModeResult:
        if self._awaiting is not None:
            return self._complete_char_argument(self._awaiting, key)

        if not self._pending and self._is_count_digit(key):
            self._count_digits.append(key.key)
            return ModeResult(
                consumed=True, status="count", message=str(self.count)
            )

        result = super().handle_key(key)
        if result.status == "miss":
            self._count_digits.clear()
        return result

    def _is_count_digit(self, key: KeyInput) -> bool:
        if key.modifiers or len(key.key) != 1 or not key.key.isdigit():
            return False
        return bool(self._count_digits) or key.key != "0"

    def _on_match(self, match: ResolutionMatch, key: KeyInput) -> ModeResult:
        del key
        if match.binding.command.takes_char:
            self._awaiting = match
            return ModeResult(
                consumed=True,
                status="pending",
                message="awaiting_char",
                command=match.binding.command,
            )
        invocation = CommandInvocation(match.binding.command, count=self.count)
        self._count_digits.clear()
        return self._execute(match, invocation)

    def _complete_char_argument(
        self, match: ResolutionMatch, key: KeyInput
    ) -> ModeResult:
        count = self.count
        self.reset_pending()
        if not is_printable(key):
            return ModeResult(
                consumed=True,
                status="cancelled",
                message="char_argument_cancelled",
                command=match.binding.command,
            )
        invocation = CommandInvocation(
            match.binding.command, count=count, target=key.text
        )
        return self._execute(match, invocation)


class PromptLayer(Mode):
    """Constrained input context (prompt/minibuffer).

    Consumes every key so nothing leaks to layers underneath. ``ENTER``
    submits and ``ESC`` cancels; both announce ``prompt.close`` on the bus
    and the owner removes the layer.
    """

    name = "prompt"
    constrained = True
    submit_keys = frozenset({"ENTER", "RETURN"})
    cancel_keys = frozenset({"ESC", "<Esc>"})

    def __init__(self, context: ModeContext, *, label: str = "") -> None:
        super().__init__(context)
        self.label = label
        self._typed: List[str] = []

    @property
    def text(self) -> str:
        return "".join(self._typed)

    def on_enter(self, previous: Optional[str]) -> None:
        self._typed.clear()
        self.context.bus.emit("prompt.open", {"label": self.label, "from": previous})

    def handle_key(self, key: KeyInput) -> ModeResult:
        if key.key in self.submit_keys or key.key in self.cancel_keys:
            submitted = key.key in self.submit_keys
            payload = {"label": self.label, "text": self.text, "submitted": submitted}
            self.context.bus.emit("prompt.close", payload)
            return ModeResult(
                consumed=True,
                status="prompt_submit" if submitted else "prompt_cancel",
                message=self.text,
            )
        if key.key == "BACKSPACE":
            if self._typed:
                self._typed.pop()
        elif is_printable(key):
            self._typed.append(key.text or "")
        return ModeResult(consumed=True, status="prompt_input", message=self.text)


__all__ = ["KeymapLayer", "OverlayLayer", "PromptLayer"]
