"""Dispatch tables mapping key chords to command variants.

Built-in tables live in :mod:`modal_motion.keymaps.defaults`, which pulls in
the command handlers and is therefore imported explicitly.
"""

from .commands import Command, CommandInvocation
from .models import ActionRef, Binding, KeySequence, KeyStroke
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import KeymapResolver, ResolutionMatch, ResolutionResult

__all__ = [
    "ActionRef",
    "Binding",
    "Command",
    "CommandInvocation",
    "KeySequence",
    "KeyStroke",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
]
