"""Base classes and shared utilities for input layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from modal_motion.buffer import Buffer, Offset
from modal_motion.keymaps.commands import Command
from modal_motion.motions import BracketNavigator, CharSearchEngine


@dataclass(slots=True)
class KeyInput:
    """Normalized key event passed to layers."""

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None


@dataclass(slots=True)
class ModeResult:
    """Result returned from ``Mode.handle_key`` and command handlers."""

    consumed: bool
    status: str = "ok"
    message: Optional[str] = None
    command: Optional[Command] = None
    position: Optional[Offset] = None


@dataclass(slots=True)
class ModeContext:
    """Per-session services every layer and command handler can reach."""

    buffer: Buffer
    search: CharSearchEngine
    brackets: BracketNavigator
    bus: "ModeBus"
    extras: Dict[str, object] = field(default_factory=dict)


class ModeBus:
    """Minimal event bus letting layers and hosts exchange structured signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


class Mode:
    """Base class for every layer that can sit on the input stack."""

    name: str = "mode"
    constrained: bool = False

    def __init__(self, context: ModeContext) -> None:
        self.context = context

    def on_enter(
        self, previous: Optional[str]
    ) -> None:  # pragma: no cover - default no-op
        del previous

    def on_exit(self) -> None:  # pragma: no cover - default no-op
        pass

    def reset_pending(self) -> None:  # pragma: no cover - default no-op
        pass

    def handle_key(
        self, key: KeyInput
    ) -> ModeResult:  # pragma: no cover - abstract override
        raise NotImplementedError


MISS = "miss"


def missed(message: Optional[str] = None) -> ModeResult:
    return ModeResult(consumed=False, status=MISS, message=message)
