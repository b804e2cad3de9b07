"""Command handlers reachable from the dispatch tables."""

from __future__ import annotations

from typing import Callable, Mapping

from modal_motion.buffer import Direction, Offset
from modal_motion.keymaps.commands import Command, CommandInvocation
from modal_motion.modes.base_mode import ModeContext, ModeResult
from modal_motion.modes.keymap_helpers import require_controller
from modal_motion.motions import MotionError
from modal_motion.runtime import telemetry

CommandHandler = Callable[[ModeContext, CommandInvocation], ModeResult]


def _motion(
    context: ModeContext,
    invocation: CommandInvocation,
    move: Callable[[], Offset],
) -> ModeResult:
    origin = context.buffer.position()
    try:
        position = move()
    except MotionError as exc:
        payload = {
            "command": invocation.command.value,
            "status": exc.status,
            "origin": origin,
            "position": context.buffer.position(),
        }
        telemetry.record_event("motion.error", level="debug", data=payload)
        context.bus.emit("motion.error", payload)
        return ModeResult(
            consumed=True,
            status=exc.status,
            message=str(exc),
            command=invocation.command,
            position=context.buffer.position(),
        )

    context.bus.emit(
        "motion.moved",
        {"command": invocation.command.value, "from": origin, "to": position},
    )
    return ModeResult(
        consumed=True, status="moved", command=invocation.command, position=position
    )


def _target(invocation: CommandInvocation) -> str:
    if invocation.target is None:
        raise ValueError(f"{invocation.command.value} needs a target character")
    return invocation.target


def search_forward(context: ModeContext, invocation: CommandInvocation) -> ModeResult:
    target = _target(invocation)
    return _motion(
        context,
        invocation,
        lambda: context.search.search(Direction.FORWARD, target, invocation.count),
    )


def search_backward(context: ModeContext, invocation: CommandInvocation) -> ModeResult:
    target = _target(invocation)
    return _motion(
        context,
        invocation,
        lambda: context.search.search(Direction.BACKWARD, target, invocation.count),
    )


def repeat_search(context: ModeContext, invocation: CommandInvocation) -> ModeResult:
    return _motion(context, invocation, lambda: context.search.repeat(invocation.count))


def reverse_repeat_search(
    context: ModeContext, invocation: CommandInvocation
) -> ModeResult:
    return _motion(
        context, invocation, lambda: context.search.reverse_repeat(invocation.count)
    )


def bracket_navigate(context: ModeContext, invocation: CommandInvocation) -> ModeResult:
    return _motion(context, invocation, context.brackets.navigate)


def activate_mode(context: ModeContext, invocation: CommandInvocation) -> ModeResult:
    changed = require_controller(context).activate()
    return ModeResult(
        consumed=True,
        status="activated" if changed else "noop",
        command=invocation.command,
    )


def deactivate_mode(context: ModeContext, invocation: CommandInvocation) -> ModeResult:
    changed = require_controller(context).deactivate()
    return ModeResult(
        consumed=True,
        status="deactivated" if changed else "noop",
        command=invocation.command,
    )


HANDLERS: Mapping[Command, CommandHandler] = {
    Command.SEARCH_FORWARD: search_forward,
    Command.SEARCH_BACKWARD: search_backward,
    Command.REPEAT_SEARCH: repeat_search,
    Command.REVERSE_REPEAT_SEARCH: reverse_repeat_search,
    Command.BRACKET_NAVIGATE: bracket_navigate,
    Command.ACTIVATE_MODE: activate_mode,
    Command.DEACTIVATE_MODE: deactivate_mode,
}


def handler_for(command: Command | str) -> CommandHandler:
    return HANDLERS[Command.parse(command)]


__all__ = [
    "CommandHandler",
    "HANDLERS",
    "handler_for",
    "search_forward",
    "search_backward",
    "repeat_search",
    "reverse_repeat_search",
    "bracket_navigate",
    "activate_mode",
    "deactivate_mode",
]
