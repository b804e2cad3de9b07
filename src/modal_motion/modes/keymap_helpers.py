"""Helper utilities for keymap-driven layers."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from modal_motion.keymaps.models import KeyStroke
from modal_motion.keymaps.resolver import KeymapResolver

from .base_mode import KeyInput, ModeContext

if TYPE_CHECKING:  # pragma: no cover
    from .controller import ModeController


def key_to_token(key: KeyInput) -> str:
    return KeyStroke(key.key, key.modifiers).token


def is_printable(key: KeyInput) -> bool:
    return bool(key.text) and len(key.text or "") == 1 and not key.modifiers


def require_keymap_resolver(context: ModeContext) -> KeymapResolver:
    resolver = context.extras.get("keymap_resolver")
    if not isinstance(resolver, KeymapResolver):
        raise RuntimeError("ModeContext.extras missing 'keymap_resolver'")
    return resolver


def require_controller(context: ModeContext) -> "ModeController":
    from .controller import ModeController

    controller = context.extras.get("mode_controller")
    if not isinstance(controller, ModeController):
        raise RuntimeError("ModeContext.extras missing 'mode_controller'")
    return cast("ModeController", controller)


__all__ = [
    "key_to_token",
    "is_printable",
    "require_keymap_resolver",
    "require_controller",
]
