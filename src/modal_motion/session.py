"""Per-buffer sessions and the workspace that tracks the frontmost one."""

from __future__ import annotations

from typing import Dict, Iterator, Optional

from modal_motion.buffer import Buffer, Direction, Offset
from modal_motion.keymaps import (
    Command,
    CommandInvocation,
    KeymapRegistry,
    KeymapResolver,
)
from modal_motion.keymaps.defaults import load_default_keymaps
from modal_motion.modes import (
    CursorAppearance,
    CursorStyle,
    InputStack,
    KeyInput,
    KeymapLayer,
    ModeBus,
    ModeConfig,
    ModeContext,
    ModeController,
    ModeResult,
    ModeState,
    OverlayLayer,
    PromptLayer,
)
from modal_motion.motions import BracketNavigator, CharSearchEngine, SearchMemory
from modal_motion.runtime import telemetry
from modal_motion.syntax import CODE_SYNTAX, SyntaxTable


class Session:
    """Everything one buffer needs: search memory, mode state, input stack.

    Nothing here is shared between sessions. The named operations raise the
    motion errors directly; key dispatch reports them as ``ModeResult``
    statuses instead.
    """

    def __init__(
        self,
        buffer: Buffer,
        *,
        syntax: SyntaxTable = CODE_SYNTAX,
        config: Optional[ModeConfig] = None,
        keymap_registry: Optional[KeymapRegistry] = None,
        cursor_style: CursorStyle = CursorStyle.BAR,
        load_defaults: bool = True,
    ) -> None:
        self.buffer = buffer
        self.config = config or ModeConfig()
        self.logger = telemetry.get_logger("modal_motion.session")
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="modal_motion.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = KeymapResolver(
            self.keymap_registry, logger_name="modal_motion.keymaps"
        )

        self.bus = ModeBus()
        self.context = ModeContext(
            buffer=buffer,
            search=CharSearchEngine(buffer),
            brackets=BracketNavigator(buffer, syntax),
            bus=self.bus,
            extras={
                "keymap_registry": self.keymap_registry,
                "keymap_resolver": self.keymap_resolver,
                "session": self,
            },
        )
        self.host_layer = KeymapLayer(self.context, name=self.config.host_mode)
        self.overlay = OverlayLayer(self.context, name=self.config.overlay_mode)
        self.stack = InputStack(self.host_layer)
        self.appearance = CursorAppearance(cursor_style)
        self.controller = ModeController(
            self.context,
            self.stack,
            self.overlay,
            self.appearance,
            config=self.config,
        )
        self._prompt: Optional[PromptLayer] = None
        self.bus.subscribe("prompt.close", lambda _payload: self.close_prompt())

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        name: str = "default",
        cursor: Offset = 0,
        case_fold: bool = False,
        **kwargs: object,
    ) -> "Session":
        buffer = Buffer.from_text(text, name=name, cursor=cursor, case_fold=case_fold)
        return cls(buffer, **kwargs)  # type: ignore[arg-type]

    @property
    def name(self) -> str:
        return self.buffer.name

    @property
    def syntax(self) -> SyntaxTable:
        return self.context.brackets.syntax

    @syntax.setter
    def syntax(self, table: SyntaxTable) -> None:
        self.context.brackets.syntax = table

    @property
    def search_memory(self) -> Optional[SearchMemory]:
        return self.context.search.memory

    @property
    def mode_state(self) -> ModeState:
        return self.controller.state

    @property
    def prompt(self) -> Optional[PromptLayer]:
        return self._prompt

    def search_forward(self, target: str, count: int = 1) -> Offset:
        return self.context.search.search(Direction.FORWARD, target, count)

    def search_backward(self, target: str, count: int = 1) -> Offset:
        return self.context.search.search(Direction.BACKWARD, target, count)

    def repeat_search(self, count: int = 1) -> Offset:
        return self.context.search.repeat(count)

    def reverse_repeat_search(self, count: int = 1) -> Offset:
        return self.context.search.reverse_repeat(count)

    def bracket_navigate(self) -> Offset:
        return self.context.brackets.navigate()

    def activate_mode(self) -> bool:
        return self.controller.activate()

    def deactivate_mode(self) -> bool:
        return self.controller.deactivate()

    def run_command(
        self,
        command: Command | CommandInvocation | str,
        *,
        count: int = 1,
        target: Optional[str] = None,
    ) -> ModeResult:
        """Execute a command variant through its registered handler."""

        if isinstance(command, CommandInvocation):
            invocation = command
        else:
            invocation = CommandInvocation(Command.parse(command), count, target)
        action = self.keymap_registry.get_action(invocation.command)
        with telemetry.span(
            "session::run_command",
            component="session",
            metadata={"session": self.name, "command": action.id},
        ):
            outcome = action(self.context, invocation)
        if isinstance(outcome, ModeResult):
            return outcome
        return ModeResult(consumed=True, command=invocation.command)

    def handle_key(self, key: KeyInput) -> ModeResult:
        if (
            self._prompt is None
            and key.key in self.config.escape_keys
            and (self.controller.active or self.overlay in self.stack)
        ):
            self.controller.on_escape()
            return ModeResult(
                consumed=True, status="deactivated", command=Command.DEACTIVATE_MODE
            )
        return self.stack.dispatch(key)

    def open_prompt(self, label: str = "") -> PromptLayer:
        """Enter a constrained input context; the overlay is forced off first."""

        if self._prompt is not None:
            return self._prompt
        self.controller.on_constrained_context()
        prompt = PromptLayer(self.context, label=label)
        self.stack.push(prompt)
        self._prompt = prompt
        return prompt

    def close_prompt(self) -> Optional[str]:
        prompt = self._prompt
        if prompt is None:
            return None
        self._prompt = None
        self.stack.remove(prompt)
        self.controller.refresh_cursor()
        return prompt.text


class Workspace:
    """Several sessions, at most one of them frontmost."""

    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}
        self._front: Optional[str] = None

    def __iter__(self) -> Iterator[Session]:
        return iter(tuple(self._sessions.values()))

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, name: object) -> bool:
        return name in self._sessions

    @property
    def frontmost(self) -> Optional[Session]:
        if self._front is None:
            return None
        return self._sessions[self._front]

    def add(self, session: Session, *, focus: bool = False) -> Session:
        if session.name in self._sessions:
            raise ValueError(f"Session '{session.name}' already open")
        self._sessions[session.name] = session
        if focus or self._front is None:
            self.focus(session.name)
        return session

    def open(
        self, text: str, *, name: str, focus: bool = True, **kwargs: object
    ) -> Session:
        return self.add(Session.from_text(text, name=name, **kwargs), focus=focus)

    def get(self, name: str) -> Session:
        try:
            return self._sessions[name]
        except KeyError as exc:
            raise KeyError(f"No session named '{name}'") from exc

    def close(self, name: str) -> Session:
        session = self.get(name)
        session.controller.force_clear(reason="close")
        del self._sessions[name]
        if self._front == name:
            self._front = None
            remaining = next(iter(self._sessions), None)
            if remaining is not None:
                self.focus(remaining)
        return session

    def focus(self, name: str) -> Session:
        """Bring ``name`` to the front and repaint its cursor for its mode."""

        session = self.get(name)
        previous = self._front
        self._front = name
        telemetry.record_event(
            "workspace.focus", level="debug", data={"from": previous, "to": name}
        )
        session.controller.refresh_cursor()
        return session

    def handle_key(self, key: KeyInput) -> ModeResult:
        session = self.frontmost
        if session is None:
            return ModeResult(consumed=False, status="unhandled")
        return session.handle_key(key)


__all__ = ["Session", "Workspace"]
