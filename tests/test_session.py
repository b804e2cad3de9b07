from __future__ import annotations

import pytest

from modal_motion.actions import search_forward
from modal_motion.buffer import Buffer, Direction
from modal_motion.keymaps import (
    Binding,
    Command,
    CommandInvocation,
    KeySequence,
    KeymapRegistry,
)
from modal_motion.keymaps.defaults import load_default_keymaps
from modal_motion.modes import KeyInput, ModeResult, ModeState
from modal_motion.motions import NoPriorSearch, SearchMemory
from modal_motion.session import Session
from modal_motion.syntax import MARKUP_SYNTAX


def make_session(text: str, *, cursor: int = 0, **kwargs: object) -> Session:
    return Session.from_text(text, cursor=cursor, **kwargs)


def make_key(key: str, *modifiers: str) -> KeyInput:
    text = key if len(key) == 1 and not modifiers else None
    return KeyInput(key=key, modifiers=modifiers, text=text)


def press(session: Session, *keys: str) -> ModeResult:
    result = ModeResult(consumed=False, status="unhandled")
    for key in keys:
        result = session.handle_key(make_key(key))
    return result


def activate_with_keys(session: Session) -> ModeResult:
    pending = session.handle_key(make_key("x", "ctrl"))
    assert pending.status == "pending"
    return session.handle_key(make_key("m"))


def test_activation_chord_installs_overlay() -> None:
    session = make_session("hello world")

    result = activate_with_keys(session)

    assert result.status == "activated"
    assert session.mode_state is ModeState.ACTIVE


def test_overlay_keys_are_unbound_while_inactive() -> None:
    session = make_session("hello world")

    result = press(session, "f")

    assert result.status == "unhandled"
    assert session.buffer.position() == 0


def test_search_reads_target_from_next_key() -> None:
    session = make_session("hello world")
    activate_with_keys(session)

    pending = press(session, "f")
    assert pending.status == "pending"
    assert pending.message == "awaiting_char"

    result = press(session, "o")
    assert result.status == "moved"
    assert result.position == 4
    assert session.search_memory == SearchMemory(Direction.FORWARD, "o")


def test_backward_search_key() -> None:
    session = make_session("hello world", cursor=10)
    session.activate_mode()

    result = press(session, "F", "o")

    assert result.position == 7


def test_count_prefix_applies_to_search() -> None:
    session = make_session("a.a.a.a")
    session.activate_mode()

    counting = press(session, "2")
    assert counting.status == "count"

    result = press(session, "f", "a")

    assert result.position == 4


def test_leading_zero_is_not_a_count() -> None:
    session = make_session("a.a.a.a")
    session.activate_mode()

    result = press(session, "0")

    assert result.status == "unhandled"
    assert session.overlay.count == 1


def test_repeat_and_reverse_repeat_keys() -> None:
    session = make_session("a.a.a.a")
    session.activate_mode()
    press(session, "f", "a")

    assert press(session, ";").position == 4
    assert press(session, ",").position == 2
    assert session.search_memory == SearchMemory(Direction.FORWARD, "a")


def test_repeat_with_count_reports_partial_progress() -> None:
    session = make_session("ax-x-x")
    session.activate_mode()
    press(session, "f", "x")

    result = press(session, "3", ";")

    assert result.status == "not_found"
    assert result.position == 5
    assert session.mode_state is ModeState.ACTIVE


def test_repeat_before_any_search_is_reported() -> None:
    session = make_session("abc", cursor=1)
    session.activate_mode()

    result = press(session, ";")

    assert result.status == "no_prior_search"
    assert session.buffer.position() == 1
    assert session.mode_state is ModeState.ACTIVE


def test_bracket_key_and_unbalanced_report() -> None:
    session = make_session("(a) (b")
    session.activate_mode()

    assert press(session, "%").position == 2

    session.buffer.set_position(4)
    result = press(session, "%")
    assert result.status == "unbalanced"
    assert session.buffer.position() == 4


def test_non_printable_key_cancels_pending_search() -> None:
    session = make_session("hello")
    session.activate_mode()
    press(session, "f")

    result = session.handle_key(make_key("x", "ctrl"))

    assert result.status == "cancelled"
    assert session.overlay.awaiting_char is False
    assert session.buffer.position() == 0


def test_exit_keys_remove_overlay() -> None:
    session = make_session("hello")
    session.activate_mode()

    result = press(session, "q")

    assert result.status == "deactivated"
    assert session.stack.names() == ("global",)


def test_unbound_overlay_key_falls_through_to_host() -> None:
    session = make_session("hello")
    session.activate_mode()

    assert press(session, "z").status == "unhandled"
    assert activate_with_keys(session).status == "noop"
    assert session.mode_state is ModeState.ACTIVE


def test_overlay_shadows_host_binding_without_destroying_it() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(
        registry,
        extra_bindings=(
            Binding(
                id="global.f",
                mode="global",
                sequence=KeySequence.from_strings("f"),
                command=Command.BRACKET_NAVIGATE,
            ),
        ),
    )
    session = Session(Buffer.from_text("(ab)(c)"), keymap_registry=registry)

    assert press(session, "f").position == 3

    session.activate_mode()
    assert press(session, "f", "(").position == 4

    session.deactivate_mode()
    assert press(session, "f").position == 6


def test_run_command_by_name() -> None:
    session = make_session("hello world")

    assert session.run_command("search_forward", target="o").position == 4
    assert session.run_command(Command.REPEAT_SEARCH).position == 7
    assert session.run_command(Command.REVERSE_REPEAT_SEARCH).position == 4

    with pytest.raises(KeyError):
        session.run_command("delete_line")


def test_run_command_reports_missing_memory() -> None:
    session = make_session("hello")

    result = session.run_command(Command.REPEAT_SEARCH)

    assert result.status == "no_prior_search"


def test_named_operations_raise_motion_errors() -> None:
    session = make_session("hello")

    with pytest.raises(NoPriorSearch):
        session.repeat_search()


def test_prompt_consumes_keys_until_submitted() -> None:
    session = make_session("hello")
    prompt = session.open_prompt("Find")

    press(session, "f", "o")
    assert prompt.text == "fo"
    assert session.buffer.position() == 0

    result = session.handle_key(make_key("ENTER"))

    assert result.status == "prompt_submit"
    assert result.message == "fo"
    assert session.prompt is None
    assert session.stack.names() == ("global",)


def test_escape_inside_prompt_cancels_prompt_only() -> None:
    session = make_session("hello")
    session.open_prompt()

    result = session.handle_key(make_key("ESC"))

    assert result.status == "prompt_cancel"
    assert session.prompt is None


def test_syntax_table_can_be_swapped() -> None:
    session = make_session("a<b>", cursor=1)

    assert session.bracket_navigate() == 0

    session.syntax = MARKUP_SYNTAX
    session.buffer.set_position(1)
    assert session.bracket_navigate() == 3


def test_search_handler_requires_target() -> None:
    session = make_session("hello")
    invocation = CommandInvocation(Command.SEARCH_FORWARD, target="o")
    object.__setattr__(invocation, "target", None)

    with pytest.raises(ValueError):
        search_forward(session.context, invocation)
    assert session.buffer.position() == 0
