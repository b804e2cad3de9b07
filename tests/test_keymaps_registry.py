import pytest

from modal_motion.actions import HANDLERS, handler_for
from modal_motion.keymaps import (
    ActionRef,
    Binding,
    Command,
    KeySequence,
    KeymapConflictError,
    KeymapRegistry,
)
from modal_motion.keymaps.defaults import DEFAULT_ACTIONS, load_default_keymaps


def make_action(command: Command = Command.BRACKET_NAVIGATE) -> ActionRef:
    return ActionRef(command=command, handler=lambda *args, **kwargs: None)


def make_sequence(*keys: str) -> KeySequence:
    return KeySequence.from_strings(*keys)


def make_binding(
    *,
    binding_id: str,
    mode: str = "overlay",
    sequence: KeySequence | None = None,
    command: Command = Command.BRACKET_NAVIGATE,
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=sequence or make_sequence("%"),
        command=command,
    )


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="overlay.percent")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings(mode="overlay")) == [binding]


def test_register_binding_requires_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="overlay.percent"))


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="overlay.percent"))

    with pytest.raises(KeymapConflictError):
        registry.register_binding(make_binding(binding_id="overlay.percent.again"))


def test_same_chord_in_other_mode_is_not_a_conflict() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="overlay.percent"))
    registry.register_binding(make_binding(binding_id="global.percent", mode="global"))

    assert registry.stats().binding_count == 2
    assert registry.stats().modes == ("global", "overlay")


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding", sequence=make_sequence("m"))

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]
    assert registry.table("overlay") == {"m": Command.BRACKET_NAVIGATE}


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0
    assert registry.unregister_binding("binding") is None


def test_default_tables() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    assert registry.table("global") == {"ctrl+x m": Command.ACTIVATE_MODE}
    overlay = registry.table("overlay")
    assert overlay["f"] is Command.SEARCH_FORWARD
    assert overlay["F"] is Command.SEARCH_BACKWARD
    assert overlay[";"] is Command.REPEAT_SEARCH
    assert overlay[","] is Command.REVERSE_REPEAT_SEARCH
    assert overlay["%"] is Command.BRACKET_NAVIGATE
    assert overlay["ESC"] is Command.DEACTIVATE_MODE
    assert registry.stats().action_count == len(Command)


def test_load_default_keymaps_include_filters() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, include_bindings=("overlay.bracket_navigate",))

    assert registry.stats().binding_count == 1
    assert (
        registry.get_binding("overlay.bracket_navigate").command
        is Command.BRACKET_NAVIGATE
    )


def test_load_default_keymaps_exclude_filters() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, exclude_bindings=("overlay.exit_q",))

    assert "q" not in registry.table("overlay")


def test_load_default_keymaps_per_mode_override() -> None:
    registry = KeymapRegistry()
    custom_binding = Binding(
        id="overlay.bracket_navigate",
        mode="overlay",
        sequence=KeySequence.from_strings("m"),
        command=Command.BRACKET_NAVIGATE,
    )

    load_default_keymaps(registry, per_mode_overrides={"overlay": (custom_binding,)})

    binding = registry.get_binding("overlay.bracket_navigate")
    assert binding.sequence.tokens == ("m",)
    assert "%" not in registry.table("overlay")


def test_per_mode_override_must_target_its_mode() -> None:
    registry = KeymapRegistry()
    stray = make_binding(binding_id="global.percent", mode="global")

    with pytest.raises(ValueError):
        load_default_keymaps(registry, per_mode_overrides={"overlay": (stray,)})


def test_action_ref_accepts_command_names() -> None:
    action = ActionRef(command="repeat_search", handler=lambda *args: None)

    assert action.command is Command.REPEAT_SEARCH
    assert action.id == "repeat_search"


def test_default_actions_cover_every_command() -> None:
    assert {action.command for action in DEFAULT_ACTIONS} == set(Command)
    for action in DEFAULT_ACTIONS:
        assert action.handler is HANDLERS[action.command]
    assert handler_for("bracket_navigate") is HANDLERS[Command.BRACKET_NAVIGATE]
