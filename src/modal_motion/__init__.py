"""Modal motion-and-search engine for text buffers."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "keymaps",
    "modes",
    "motions",
    "runtime",
    "session",
    "syntax",
]

__version__ = "0.1.0"
