"""Yo-yo bracket navigation between balanced pairs."""

from __future__ import annotations

from typing import Callable, Dict

from modal_motion.buffer import Buffer, Direction, Offset
from modal_motion.runtime import telemetry
from modal_motion.syntax import SyntaxClass, SyntaxTable

from .errors import UnbalancedDelimiter

OPENER_FAMILIES = ("(", "[", "{", "<")


def _balancer(inner: str, outer: str) -> Callable[[str], bool]:
    """Predicate that fires on the ``outer`` char closing the first ``inner``."""

    depth = 0

    def predicate(char: str) -> bool:
        nonlocal depth
        if char == inner:
            depth += 1
        elif char == outer:
            depth -= 1
            return depth == 0
        return False

    return predicate


class BracketNavigator:
    """Jumps between bracket partners, or to the nearest opener on the line.

    Only brackets of the same family are counted when balancing, so
    ``([)]`` still pairs the ``(`` with the ``)``.
    """

    def __init__(
        self,
        buffer: Buffer,
        syntax: SyntaxTable,
        *,
        logger_name: str | None = None,
    ) -> None:
        self.buffer = buffer
        self.syntax = syntax
        self._logger_name = logger_name

    def navigate(self) -> Offset:
        origin = self.buffer.position()
        kind = self.syntax.classify(self.buffer.char_at(origin))
        with telemetry.span(
            "motions::bracket_navigate",
            logger_name=self._logger_name,
            component="motions",
            metadata={"origin": origin, "class": kind.value},
        ) as handle:
            if kind is SyntaxClass.OPEN_BRACKET:
                target = self.forward_sexp(origin) - 1
            elif kind is SyntaxClass.CLOSE_BRACKET:
                target = self.backward_sexp(origin + 1)
            else:
                target = self._nearest_opener_or_line_edge(origin)
            handle.add_metadata("target", target)
        return self.buffer.set_position(target)

    def forward_sexp(self, offset: Offset) -> Offset:
        """Offset just past the balanced span opening at ``offset``."""

        opener = self.buffer.char_at(offset)
        if opener is None or not self._is(opener, SyntaxClass.OPEN_BRACKET):
            raise UnbalancedDelimiter(offset, opener)
        closer = self.syntax.matching_bracket(opener)
        hit = self.buffer.scan(
            Direction.FORWARD, _balancer(opener, closer), start=offset
        )
        if hit is None:
            raise UnbalancedDelimiter(offset, opener)
        return hit + 1

    def backward_sexp(self, end: Offset) -> Offset:
        """Start of the balanced span whose closing bracket sits at ``end - 1``."""

        closer = self.buffer.char_at(end - 1)
        if closer is None or not self._is(closer, SyntaxClass.CLOSE_BRACKET):
            raise UnbalancedDelimiter(end - 1, closer)
        opener = self.syntax.matching_bracket(closer)
        hit = self.buffer.scan(Direction.BACKWARD, _balancer(closer, opener), start=end)
        if hit is None:
            raise UnbalancedDelimiter(end - 1, closer)
        return hit

    def _is(self, char: str, kind: SyntaxClass) -> bool:
        return self.syntax.classify(char) is kind

    def _nearest_opener_or_line_edge(self, origin: Offset) -> Offset:
        line_start = self.buffer.line_start(origin)
        candidates: Dict[str, Offset] = {}
        for family in OPENER_FAMILIES:
            hit = self.buffer.scan(
                Direction.BACKWARD,
                lambda char, family=family: char == family,
                limit=line_start,
                start=origin,
            )
            if hit is not None:
                candidates[family] = hit

        if candidates:
            nearest = max(candidates.values())
            kind = self.syntax.classify(self.buffer.char_at(nearest))
            if kind is SyntaxClass.OPEN_BRACKET:
                return nearest

        if origin != line_start:
            return line_start
        return self.buffer.line_end(origin)


__all__ = ["BracketNavigator", "OPENER_FAMILIES"]
