"""Error kinds reported by motions.

None of these are fatal to a session: search memory, the cursor and the mode
state remain valid after any of them is raised.
"""

from __future__ import annotations

from typing import Optional

from modal_motion.buffer import Direction, Offset


class MotionError(RuntimeError):
    """Base class for recoverable motion failures."""

    status = "motion_error"


class SearchNotFound(MotionError):
    """Fewer matches remained than requested.

    ``position`` is where the cursor was left (the furthest match reached,
    or the starting point when nothing matched). ``found`` counts matches of
    the failing scan and ``completed`` counts whole replays that succeeded
    before a repeat loop halted.
    """

    status = "not_found"

    def __init__(
        self,
        target: str,
        direction: Direction,
        *,
        position: Offset,
        found: int = 0,
        completed: int = 0,
    ) -> None:
        super().__init__(f"Search {direction.value} for {target!r} failed")
        self.target = target
        self.direction = direction
        self.position = position
        self.found = found
        self.completed = completed


class NoPriorSearch(MotionError):
    """Repeat requested before any primary search."""

    status = "no_prior_search"

    def __init__(self) -> None:
        super().__init__("No previous character search to repeat")


class UnbalancedDelimiter(MotionError):
    """A bracket has no structural partner."""

    status = "unbalanced"

    def __init__(self, offset: Offset, char: Optional[str]) -> None:
        super().__init__(f"Unbalanced delimiter {char!r} at offset {offset}")
        self.offset = offset
        self.char = char


__all__ = [
    "MotionError",
    "SearchNotFound",
    "NoPriorSearch",
    "UnbalancedDelimiter",
]
