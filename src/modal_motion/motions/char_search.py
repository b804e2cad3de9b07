"""Single-character directional search with repeat memory."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from modal_motion.buffer import Buffer, Direction, Offset
from modal_motion.runtime import telemetry

from .errors import NoPriorSearch, SearchNotFound


def _ensure_char(target: str) -> str:
    if not isinstance(target, str) or len(target) != 1:
        raise ValueError(f"Search target must be a single character, got {target!r}")
    return target


@dataclass(frozen=True, slots=True)
class SearchMemory:
    """Direction and character of the last primary search."""

    direction: Direction
    target: str

    def __post_init__(self) -> None:
        _ensure_char(self.target)

    def reversed(self) -> "SearchMemory":
        return SearchMemory(self.direction.flipped, self.target)


class CharSearchEngine:
    """Finds the n-th occurrence of a character and remembers primary searches.

    Forward searches never match the character under the cursor and leave the
    cursor on the matched character. Backward searches likewise skip the
    cursor's own character. Scans are always case-sensitive, whatever the
    buffer's ``case_fold`` setting.
    """

    def __init__(self, buffer: Buffer, *, logger_name: str | None = None) -> None:
        self.buffer = buffer
        self._memory: Optional[SearchMemory] = None
        self._logger_name = logger_name

    @property
    def memory(self) -> Optional[SearchMemory]:
        return self._memory

    def search(
        self,
        direction: Direction,
        target: str,
        count: int = 1,
        *,
        primary: bool = True,
    ) -> Offset:
        _ensure_char(target)
        count = max(1, count)
        if primary:
            self._memory = SearchMemory(direction, target)

        origin = self.buffer.position()
        with telemetry.span(
            "motions::char_search",
            logger_name=self._logger_name,
            component="motions",
            metadata={
                "direction": direction.value,
                "target": target,
                "count": count,
                "primary": primary,
            },
        ) as handle:
            with self.buffer.case_sensitive(True):
                found, landing = self._scan(direction, target, count, origin)
            if landing is not None:
                self.buffer.set_position(landing)
            handle.add_metadata("found", found)

        if found < count:
            raise SearchNotFound(
                target, direction, position=self.buffer.position(), found=found
            )
        return self.buffer.position()

    def repeat(self, count: int = 1) -> Offset:
        memory = self._require_memory()
        return self._replay(memory, count)

    def reverse_repeat(self, count: int = 1) -> Offset:
        memory = self._require_memory()
        return self._replay(memory.reversed(), count)

    def _require_memory(self) -> SearchMemory:
        if self._memory is None:
            raise NoPriorSearch()
        return self._memory

    def _replay(self, memory: SearchMemory, count: int) -> Offset:
        completed = 0
        for _ in range(max(1, count)):
            try:
                self.search(memory.direction, memory.target, 1, primary=False)
            except SearchNotFound as exc:
                exc.completed = completed
                raise
            completed += 1
        return self.buffer.position()

    def _scan(
        self, direction: Direction, target: str, count: int, origin: Offset
    ) -> Tuple[int, Optional[Offset]]:
        buffer = self.buffer
        if direction is Direction.FORWARD:
            if origin >= buffer.length:
                return 0, None
            start = origin + 1
        else:
            start = origin

        found = 0
        landing: Optional[Offset] = None
        while found < count:
            hit = buffer.scan(
                direction, lambda char: buffer.chars_equal(char, target), start=start
            )
            if hit is None:
                break
            found += 1
            landing = hit
            start = hit + 1 if direction is Direction.FORWARD else hit
        return found, landing


__all__ = ["SearchMemory", "CharSearchEngine"]
