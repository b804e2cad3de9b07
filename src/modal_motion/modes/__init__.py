"""Input layers, the input stack and the overlay mode controller."""

from .base_mode import KeyInput, Mode, ModeBus, ModeContext, ModeResult
from .controller import ModeConfig, ModeController, ModeState
from .cursor import CursorAppearance, CursorStyle
from .layers import KeymapLayer, OverlayLayer, PromptLayer
from .stack import InputStack

__all__ = [
    "CursorAppearance",
    "CursorStyle",
    "InputStack",
    "KeyInput",
    "KeymapLayer",
    "Mode",
    "ModeBus",
    "ModeConfig",
    "ModeContext",
    "ModeController",
    "ModeResult",
    "ModeState",
    "OverlayLayer",
    "PromptLayer",
]
