from __future__ import annotations

import pytest

from modal_motion.buffer import Buffer, BufferValidationError, Direction


def test_char_at_reports_end_of_buffer() -> None:
    buffer = Buffer.from_text("ab\ncd")

    assert buffer.length == 5
    assert buffer.char_at(0) == "a"
    assert buffer.char_at(2) == "\n"
    assert buffer.char_at(5) is None
    assert buffer.char_at(-1) is None


def test_set_position_accepts_one_past_end_only() -> None:
    buffer = Buffer.from_text("abc")

    buffer.set_position(3)
    assert buffer.position() == 3

    with pytest.raises(BufferValidationError):
        buffer.set_position(4)
    with pytest.raises(BufferValidationError):
        buffer.set_position(-1)
    assert buffer.position() == 3


def test_scan_forward_includes_start() -> None:
    buffer = Buffer.from_text("ab\ncd")

    assert buffer.scan(Direction.FORWARD, lambda ch: ch == "a") == 0
    assert buffer.scan(Direction.FORWARD, lambda ch: ch == "c") == 3
    assert buffer.scan(Direction.FORWARD, lambda ch: ch == "c", limit=3) is None


def test_scan_backward_skips_character_at_start() -> None:
    buffer = Buffer.from_text("ab\ncd", cursor=4)

    assert buffer.scan(Direction.BACKWARD, lambda ch: ch == "d") is None
    assert buffer.scan(Direction.BACKWARD, lambda ch: ch == "a") == 0
    assert buffer.scan(Direction.BACKWARD, lambda ch: ch == "a", limit=3) is None
    assert buffer.scan(Direction.BACKWARD, lambda ch: ch == "c", limit=3) == 3


def test_scan_from_explicit_start() -> None:
    buffer = Buffer.from_text("xoxox")

    assert buffer.scan(Direction.FORWARD, lambda ch: ch == "x", start=1) == 2
    assert buffer.scan(Direction.BACKWARD, lambda ch: ch == "x", start=4) == 2
    assert buffer.position() == 0


def test_line_bounds() -> None:
    buffer = Buffer.from_text("ab\ncd\n", cursor=4)

    assert buffer.line_start() == 3
    assert buffer.line_end() == 5
    assert (buffer.line_start(1), buffer.line_end(1)) == (0, 2)
    assert (buffer.line_start(6), buffer.line_end(6)) == (6, 6)


def test_case_sensitive_override_restores_on_error() -> None:
    buffer = Buffer.from_text("Aa", case_fold=True)
    assert buffer.chars_equal("a", "A")

    with pytest.raises(RuntimeError):
        with buffer.case_sensitive():
            assert buffer.case_fold is False
            assert not buffer.chars_equal("a", "A")
            raise RuntimeError("boom")

    assert buffer.case_fold is True


def test_case_sensitive_can_force_folding() -> None:
    buffer = Buffer.from_text("Aa")

    with buffer.case_sensitive(False):
        assert buffer.chars_equal("a", "A")
    assert not buffer.chars_equal("a", "A")


def test_mirror_reports_row_col_and_selection() -> None:
    buffer = Buffer.from_text("ab\ncd")
    buffer.set_mark(1)
    buffer.set_position(4)

    mirror = buffer.mirror(attributes={"mode": "active"})

    assert mirror.cursor == 4
    assert mirror.row_col == (1, 1)
    assert mirror.selection == (1, 4)
    assert mirror.attributes == {"mode": "active"}

    buffer.clear_selection()
    assert buffer.selection() is None
