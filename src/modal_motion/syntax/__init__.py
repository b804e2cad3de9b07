"""Syntax classifiers supplied per buffer session."""

from .classes import SyntaxClass
from .table import (
    CODE_SYNTAX,
    MARKUP_SYNTAX,
    BracketPair,
    CharSyntaxTable,
    SyntaxTable,
    preset_names,
    syntax_for,
)

__all__ = [
    "SyntaxClass",
    "SyntaxTable",
    "CharSyntaxTable",
    "BracketPair",
    "CODE_SYNTAX",
    "MARKUP_SYNTAX",
    "syntax_for",
    "preset_names",
]
