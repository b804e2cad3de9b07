"""Textual host adapter.

The demo application lives in :mod:`modal_motion.adapters.textual.app` and is
imported on demand so the adapter itself stays importable without Textual.
"""

from .controller import TextualMotionAdapter, TextualUIHooks

__all__ = ["TextualMotionAdapter", "TextualUIHooks"]
