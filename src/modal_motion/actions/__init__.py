"""Command handlers wired into the default dispatch tables."""

from .core import (
    HANDLERS,
    CommandHandler,
    activate_mode,
    bracket_navigate,
    deactivate_mode,
    handler_for,
    repeat_search,
    reverse_repeat_search,
    search_backward,
    search_forward,
)

__all__ = [
    "HANDLERS",
    "CommandHandler",
    "handler_for",
    "search_forward",
    "search_backward",
    "repeat_search",
    "reverse_repeat_search",
    "bracket_navigate",
    "activate_mode",
    "deactivate_mode",
]
