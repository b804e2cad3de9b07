"""Enumerated command set produced by dispatch tables."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Command(Enum):
    SEARCH_FORWARD = "search_forward"
    SEARCH_BACKWARD = "search_backward"
    REPEAT_SEARCH = "repeat_search"
    REVERSE_REPEAT_SEARCH = "reverse_repeat_search"
    BRACKET_NAVIGATE = "bracket_navigate"
    ACTIVATE_MODE = "activate_mode"
    DEACTIVATE_MODE = "deactivate_mode"

    @property
    def takes_char(self) -> bool:
        return self in (Command.SEARCH_FORWARD, Command.SEARCH_BACKWARD)

    @classmethod
    def parse(cls, value: "Command | str") -> "Command":
        if isinstance(value, Command):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise KeyError(f"Unknown command '{value}'") from exc


@dataclass(frozen=True, slots=True)
class CommandInvocation:
    """Tagged command variant plus its repeat count and character argument."""

    command: Command
    count: int = 1
    target: Optional[str] = None

    def __post_init__(self) -> None:
        if self.count < 1:
            object.__setattr__(self, "count", 1)
        if self.command.takes_char:
            if self.target is None or len(self.target) != 1:
                raise ValueError(
                    f"{self.command.value} needs a single target character"
                )
        elif self.target is not None:
            raise ValueError(f"{self.command.value} takes no target character")


__all__ = ["Command", "CommandInvocation"]
