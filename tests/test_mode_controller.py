from __future__ import annotations

from typing import List, Optional

import pytest

from modal_motion.modes import (
    CursorStyle,
    InputStack,
    KeyInput,
    ModeConfig,
    ModeController,
    ModeState,
    OverlayLayer,
)
from modal_motion.session import Session, Workspace


class RefusingOverlay(OverlayLayer):
    def on_enter(self, previous: Optional[str]) -> None:
        raise RuntimeError(f"cannot enter from {previous}")


def make_session(text: str = "hello (world)", **kwargs: object) -> Session:
    return Session.from_text(text, **kwargs)


def record_styles(session: Session) -> List[CursorStyle]:
    styles: List[CursorStyle] = []
    session.appearance.subscribe(styles.append)
    return styles


def test_fresh_session_is_inactive() -> None:
    session = make_session()

    assert session.mode_state is ModeState.INACTIVE
    assert session.stack.names() == ("global",)
    assert session.appearance.style is CursorStyle.BAR


def test_activate_installs_overlay_and_cursor() -> None:
    session = make_session()

    assert session.activate_mode() is True

    assert session.mode_state is ModeState.ACTIVE
    assert session.stack.names() == ("global", "overlay")
    assert session.stack.top is session.overlay
    assert session.controller.previous_layer is session.host_layer
    assert session.appearance.style is CursorStyle.BOX


def test_deactivate_restores_previous_layer_and_cursor() -> None:
    session = make_session(cursor_style=CursorStyle.HBAR)
    session.activate_mode()

    assert session.deactivate_mode() is True

    assert session.mode_state is ModeState.INACTIVE
    assert session.stack.names() == ("global",)
    assert session.stack.top is session.host_layer
    assert session.appearance.style is CursorStyle.HBAR
    assert session.controller.previous_layer is None


def test_transitions_are_idempotent() -> None:
    session = make_session()

    assert session.deactivate_mode() is False
    assert session.activate_mode() is True
    assert session.activate_mode() is False
    assert session.stack.names() == ("global", "overlay")

    assert session.deactivate_mode() is True
    assert session.deactivate_mode() is False
    assert session.stack.names() == ("global",)


def test_failed_cursor_update_rolls_back_activation() -> None:
    session = make_session()

    def paint(style: CursorStyle) -> None:
        if style is CursorStyle.BOX:
            raise RuntimeError("paint failed")

    session.appearance.subscribe(paint)

    with pytest.raises(RuntimeError):
        session.activate_mode()

    assert session.mode_state is ModeState.INACTIVE
    assert session.stack.names() == ("global",)
    assert session.appearance.style is CursorStyle.BAR


def test_failed_overlay_enter_rolls_back_activation() -> None:
    session = make_session()
    controller = ModeController(
        session.context,
        session.stack,
        RefusingOverlay(session.context),
        session.appearance,
    )

    with pytest.raises(RuntimeError):
        controller.activate()

    assert controller.state is ModeState.INACTIVE
    assert session.stack.names() == ("global",)
    assert session.appearance.style is CursorStyle.BAR


def test_stack_push_drops_layer_when_enter_fails() -> None:
    session = make_session()
    stack = InputStack(session.host_layer)

    with pytest.raises(RuntimeError):
        stack.push(RefusingOverlay(session.context))

    assert stack.names() == ("global",)


def test_activate_recovers_from_stuck_overlay() -> None:
    session = make_session()
    session.stack.push(session.overlay)

    assert session.activate_mode() is True
    assert session.mode_state is ModeState.ACTIVE
    assert session.stack.names() == ("global", "overlay")
    assert session.appearance.style is CursorStyle.BOX

    assert session.deactivate_mode() is True
    assert session.stack.names() == ("global",)
    assert session.appearance.style is CursorStyle.BAR


def test_inactive_refresh_keeps_host_cursor_changes() -> None:
    workspace = Workspace()
    session = workspace.open("abc", name="only")
    session.activate_mode()
    session.deactivate_mode()

    session.appearance.apply(CursorStyle.HBAR)
    workspace.focus("only")
    session.controller.refresh_cursor()

    assert session.appearance.style is CursorStyle.HBAR


def test_escape_clears_overlay() -> None:
    session = make_session()
    session.activate_mode()

    result = session.handle_key(KeyInput(key="ESC"))

    assert result.status == "deactivated"
    assert session.mode_state is ModeState.INACTIVE
    assert session.stack.names() == ("global",)


def test_escape_clears_overlay_stuck_without_state() -> None:
    session = make_session()
    session.stack.push(session.overlay)

    result = session.handle_key(KeyInput(key="ESC"))

    assert result.status == "deactivated"
    assert session.stack.names() == ("global",)


def test_prompt_forces_overlay_off() -> None:
    session = make_session()
    session.activate_mode()

    session.open_prompt("Find")

    assert session.mode_state is ModeState.INACTIVE
    assert session.stack.names() == ("global", "prompt")
    assert session.appearance.style is CursorStyle.BAR


def test_activation_refused_inside_prompt() -> None:
    session = make_session()
    session.open_prompt()

    assert session.activate_mode() is False
    assert session.mode_state is ModeState.INACTIVE
    assert session.stack.names() == ("global", "prompt")


def test_force_clear_never_raises_on_listener_error() -> None:
    session = make_session()
    session.activate_mode()

    def explode(_payload: object) -> None:
        raise RuntimeError("listener broke")

    session.bus.subscribe("mode.deactivate", explode)

    session.controller.force_clear(reason="test")

    assert session.mode_state is ModeState.INACTIVE
    assert session.stack.names() == ("global",)


def test_search_memory_survives_mode_transitions() -> None:
    session = make_session("a.a.a")
    session.activate_mode()
    session.search_forward("a")
    session.deactivate_mode()
    session.activate_mode()

    assert session.repeat_search() == 4


def test_bus_announces_transitions() -> None:
    session = make_session()
    events: List[str] = []
    session.bus.subscribe("mode.activate", lambda _p: events.append("activate"))
    session.bus.subscribe("mode.deactivate", lambda _p: events.append("deactivate"))

    session.activate_mode()
    session.activate_mode()
    session.deactivate_mode()

    assert events == ["activate", "deactivate"]


def test_deactivate_restores_cursor_and_refresh_uses_inactive_style() -> None:
    config = ModeConfig(
        active_cursor=CursorStyle.HOLLOW, inactive_cursor=CursorStyle.HBAR
    )
    session = make_session(config=config)

    session.activate_mode()
    assert session.appearance.style is CursorStyle.HOLLOW

    session.deactivate_mode()
    assert session.appearance.style is CursorStyle.BAR

    session.controller.refresh_cursor()
    assert session.appearance.style is CursorStyle.HBAR


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODAL_MOTION_ACTIVE_CURSOR", "Hollow")
    monkeypatch.delenv("MODAL_MOTION_INACTIVE_CURSOR", raising=False)

    config = ModeConfig.from_env()

    assert config.active_cursor is CursorStyle.HOLLOW
    assert config.inactive_cursor is None


def test_focus_repaints_cursor_for_each_session() -> None:
    workspace = Workspace()
    first = workspace.open("abc", name="first")
    second = workspace.open("def", name="second", focus=False)
    first.activate_mode()
    first_styles = record_styles(first)
    second_styles = record_styles(second)

    workspace.focus("second")
    workspace.focus("first")

    assert second_styles == [CursorStyle.BAR]
    assert first_styles == [CursorStyle.BOX]
    assert workspace.frontmost is first


def test_sessions_keep_separate_state() -> None:
    workspace = Workspace()
    first = workspace.open("x.x", name="first")
    second = workspace.open("x.x", name="second")

    first.activate_mode()
    first.search_forward("x")

    assert second.mode_state is ModeState.INACTIVE
    assert second.search_memory is None
    assert workspace.frontmost is second


def test_closing_frontmost_session_focuses_another() -> None:
    workspace = Workspace()
    first = workspace.open("abc", name="first")
    second = workspace.open("def", name="second")
    second.activate_mode()

    closed = workspace.close("second")

    assert closed.mode_state is ModeState.INACTIVE
    assert workspace.frontmost is first
    assert "second" not in workspace
    assert len(workspace) == 1
