"""Swappable syntax tables handed to each buffer session."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Protocol, Tuple

from .classes import SyntaxClass

BracketPair = Tuple[str, str]


class SyntaxTable(Protocol):
    """What the bracket navigator needs from a classifier."""

    name: str

    def classify(self, char: Optional[str]) -> SyntaxClass:
        ...

    def matching_bracket(self, char: str) -> str:
        ...


class CharSyntaxTable:
    """Syntax table built from explicit bracket pairs.

    Anything that is not a listed bracket falls back to whitespace, word or
    ``OTHER`` classification. ``None`` (end of buffer) is always ``OTHER``.
    """

    def __init__(
        self,
        name: str,
        pairs: Iterable[BracketPair],
        *,
        word_chars: str = "_",
    ) -> None:
        if not name:
            raise ValueError("syntax table name cannot be empty")
        openers: Dict[str, str] = {}
        closers: Dict[str, str] = {}
        for opener, closer in pairs:
            if len(opener) != 1 or len(closer) != 1 or opener == closer:
                raise ValueError(f"Invalid bracket pair {opener!r}/{closer!r}")
            seen = openers.keys() | closers.keys()
            if opener in seen or closer in seen:
                raise ValueError(f"Bracket {opener!r}/{closer!r} declared twice")
            openers[opener] = closer
            closers[closer] = opener
        self.name = name
        self._openers = MappingProxyType(openers)
        self._closers = MappingProxyType(closers)
        self._word_chars = frozenset(word_chars)

    @property
    def pairs(self) -> Mapping[str, str]:
        return self._openers

    def classify(self, char: Optional[str]) -> SyntaxClass:
        if not char:
            return SyntaxClass.OTHER
        if char in self._openers:
            return SyntaxClass.OPEN_BRACKET
        if char in self._closers:
            return SyntaxClass.CLOSE_BRACKET
        if char.isspace():
            return SyntaxClass.WHITESPACE
        if char.isalnum() or char in self._word_chars:
            return SyntaxClass.WORD_CHAR
        return SyntaxClass.OTHER

    def matching_bracket(self, char: str) -> str:
        if char in self._openers:
            return self._openers[char]
        if char in self._closers:
            return self._closers[char]
        raise KeyError(f"{char!r} is not a bracket in syntax table '{self.name}'")

    def is_open(self, char: Optional[str]) -> bool:
        return self.classify(char) is SyntaxClass.OPEN_BRACKET

    def is_close(self, char: Optional[str]) -> bool:
        return self.classify(char) is SyntaxClass.CLOSE_BRACKET

    def __repr__(self) -> str:
        return f"CharSyntaxTable({self.name!r}, pairs={dict(self._openers)!r})"


CODE_SYNTAX = CharSyntaxTable("code", (("(", ")"), ("[", "]"), ("{", "}")))
MARKUP_SYNTAX = CharSyntaxTable(
    "markup", (("(", ")"), ("[", "]"), ("{", "}"), ("<", ">")), word_chars="_-"
)

_PRESETS: Mapping[str, CharSyntaxTable] = MappingProxyType(
    {table.name: table for table in (CODE_SYNTAX, MARKUP_SYNTAX)}
)


def syntax_for(name: str) -> CharSyntaxTable:
    try:
        return _PRESETS[name.lower()]
    except KeyError as exc:
        raise KeyError(f"Unknown syntax preset '{name}'") from exc


def preset_names() -> tuple[str, ...]:
    return tuple(sorted(_PRESETS))


__all__ = [
    "BracketPair",
    "SyntaxTable",
    "CharSyntaxTable",
    "CODE_SYNTAX",
    "MARKUP_SYNTAX",
    "syntax_for",
    "preset_names",
]
