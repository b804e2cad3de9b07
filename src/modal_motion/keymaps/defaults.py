"""Built-in dispatch tables for the host layer and the overlay."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from modal_motion.actions import core as core_actions

from .commands import Command
from .models import ActionRef, Binding, KeySequence
from .registry import KeymapRegistry

HOST_MODE = "global"
OVERLAY_MODE = "overlay"

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(
        command=Command.SEARCH_FORWARD,
        handler=core_actions.search_forward,
        description="Jump forward to a character",
    ),
    ActionRef(
        command=Command.SEARCH_BACKWARD,
        handler=core_actions.search_backward,
        description="Jump backward to a character",
    ),
    ActionRef(
        command=Command.REPEAT_SEARCH,
        handler=core_actions.repeat_search,
        description="Repeat the last character search",
    ),
    ActionRef(
        command=Command.REVERSE_REPEAT_SEARCH,
        handler=core_actions.reverse_repeat_search,
        description="Repeat the last character search in the other direction",
    ),
    ActionRef(
        command=Command.BRACKET_NAVIGATE,
        handler=core_actions.bracket_navigate,
        description="Yo-yo between bracket partners",
    ),
    ActionRef(
        command=Command.ACTIVATE_MODE,
        handler=core_actions.activate_mode,
        description="Install the overlay dispatch table",
    ),
    ActionRef(
        command=Command.DEACTIVATE_MODE,
        handler=core_actions.deactivate_mode,
        description="Remove the overlay dispatch table",
    ),
)


def _bind(
    binding_id: str, mode: str, keys: Sequence[str], command: Command, description: str
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.from_strings(*keys),
        command=command,
        description=description,
        source="defaults",
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    _bind(
        "global.activate",
        HOST_MODE,
        ("ctrl+x", "m"),
        Command.ACTIVATE_MODE,
        "Enter the motion overlay",
    ),
    _bind(
        "overlay.search_forward",
        OVERLAY_MODE,
        ("f",),
        Command.SEARCH_FORWARD,
        "Find character forward",
    ),
    _bind(
        "overlay.search_backward",
        OVERLAY_MODE,
        ("F",),
        Command.SEARCH_BACKWARD,
        "Find character backward",
    ),
    _bind(
        "overlay.repeat_search",
        OVERLAY_MODE,
        (";",),
        Command.REPEAT_SEARCH,
        "Repeat character search",
    ),
    _bind(
        "overlay.reverse_repeat_search",
        OVERLAY_MODE,
        (",",),
        Command.REVERSE_REPEAT_SEARCH,
        "Repeat character search backward",
    ),
    _bind(
        "overlay.bracket_navigate",
        OVERLAY_MODE,
        ("%",),
        Command.BRACKET_NAVIGATE,
        "Jump between brackets",
    ),
    _bind(
        "overlay.exit_escape",
        OVERLAY_MODE,
        ("ESC",),
        Command.DEACTIVATE_MODE,
        "Leave the overlay",
    ),
    _bind(
        "overlay.exit_escape_alt",
        OVERLAY_MODE,
        ("<Esc>",),
        Command.DEACTIVATE_MODE,
        "Leave the overlay",
    ),
    _bind(
        "overlay.exit_q",
        OVERLAY_MODE,
        ("q",),
        Command.DEACTIVATE_MODE,
        "Leave the overlay",
    ),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
    per_mode_overrides: Mapping[str, Iterable[Binding]] | None = None,
) -> None:
    """Register every command handler and the selected built-in bindings."""

    include = set(include_bindings) if include_bindings else None
    exclude = set(exclude_bindings or ())

    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if include is not None and binding.id not in include:
            continue
        if binding.id in exclude:
            continue
        registry.register_binding(binding, replace=replace)

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=replace)

    for mode, bindings in (per_mode_overrides or {}).items():
        for binding in bindings:
            if binding.mode != mode:
                raise ValueError(
                    f"Override binding '{binding.id}' must target mode '{mode}'"
                )
            registry.register_binding(binding, replace=True)


__all__ = [
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "HOST_MODE",
    "OVERLAY_MODE",
    "load_default_keymaps",
]
