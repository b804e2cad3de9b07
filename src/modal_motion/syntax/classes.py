"""Structural character classes."""

from __future__ import annotations

from enum import Enum


class SyntaxClass(Enum):
    OPEN_BRACKET = "open"
    CLOSE_BRACKET = "close"
    WORD_CHAR = "word"
    WHITESPACE = "whitespace"
    OTHER = "other"

    @property
    def is_bracket(self) -> bool:
        return self in (SyntaxClass.OPEN_BRACKET, SyntaxClass.CLOSE_BRACKET)


__all__ = ["SyntaxClass"]
