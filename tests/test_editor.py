"""Tests for the in-memory LineBuffer."""

import pytest

from mesita.editor import LineBuffer
from mesita.errors import BufferRangeError
from mesita.location import Point, Range


class TestLineBufferBasics:
    """Construction, lines and cursor."""

    def test_from_text(self) -> None:
        buffer = LineBuffer("a\nb\n")
        assert buffer.lines == ["a", "b", ""]
        assert buffer.get_last_row() == 2
        assert buffer.text == "a\nb\n"

    def test_from_lines(self) -> None:
        buffer = LineBuffer(["a", "b"])
        assert buffer.get_line(1) == "b"

    def test_empty_buffer_has_one_line(self) -> None:
        assert LineBuffer().lines == [""]
        assert LineBuffer([]).lines == [""]

    def test_cursor_is_clipped(self) -> None:
        buffer = LineBuffer(["abc", "d"], cursor=Point(5, 9))
        assert buffer.get_cursor_position() == Point(1, 1)
        buffer.set_cursor_position(Point(0, -3))
        assert buffer.get_cursor_position() == Point(0, 0)

    def test_selection(self) -> None:
        buffer = LineBuffer(["abcdef"])
        buffer.set_selection_range(Range(Point(0, 1), Point(0, 4)))
        assert buffer.selection == Range(Point(0, 1), Point(0, 4))
        assert buffer.get_cursor_position() == Point(0, 4)
        buffer.set_cursor_position(Point(0, 0))
        assert buffer.selection is None

    def test_accepts_table_edit(self) -> None:
        assert LineBuffer(["a"]).accepts_table_edit(0)
        buffer = LineBuffer(["a", "b"], accepts_table_edit=lambda row: row > 0)
        assert not buffer.accepts_table_edit(0)
        assert buffer.accepts_table_edit(1)


class TestLineBufferEdits:
    """Line edits and range errors."""

    def test_insert_line(self) -> None:
        buffer = LineBuffer(["a", "c"])
        buffer.insert_line(1, "b")
        assert buffer.lines == ["a", "b", "c"]

    def test_insert_line_past_end_appends(self) -> None:
        buffer = LineBuffer(["a"])
        buffer.insert_line(7, "b")
        assert buffer.lines == ["a", "b"]

    def test_delete_line(self) -> None:
        buffer = LineBuffer(["a", "b"])
        buffer.delete_line(0)
        assert buffer.lines == ["b"]
        buffer.delete_line(0)
        assert buffer.lines == [""]

    def test_replace_lines(self) -> None:
        buffer = LineBuffer(["a", "b", "c"])
        buffer.replace_lines(1, 2, ["x", "y"])
        assert buffer.lines == ["a", "x", "y", "c"]

    def test_get_line_out_of_range(self) -> None:
        with pytest.raises(BufferRangeError) as exc_info:
            LineBuffer(["a"]).get_line(3)
        assert exc_info.value.row == 3
        assert exc_info.value.last_row == 0

    def test_range_error_is_index_error(self) -> None:
        with pytest.raises(IndexError):
            LineBuffer(["a"]).delete_line(-1)

    def test_replace_lines_bad_range(self) -> None:
        with pytest.raises(BufferRangeError):
            LineBuffer(["a"]).replace_lines(1, 0, [])


class TestLineBufferUndo:
    """Transactions and undo."""

    def test_edit_outside_transaction_is_one_step(self) -> None:
        buffer = LineBuffer(["a"])
        buffer.insert_line(1, "b")
        buffer.insert_line(2, "c")
        assert buffer.undo_depth == 2
        assert buffer.undo()
        assert buffer.lines == ["a", "b"]

    def test_transaction_is_one_step(self) -> None:
        buffer = LineBuffer(["a"])
        with buffer.transact():
            buffer.insert_line(1, "b")
            with buffer.transact():
                buffer.replace_lines(0, 1, ["x"])
        assert buffer.lines == ["x", "b"]
        assert buffer.undo_depth == 1
        buffer.undo()
        assert buffer.lines == ["a"]

    def test_unchanged_transaction_records_nothing(self) -> None:
        buffer = LineBuffer(["a"])
        with buffer.transact():
            buffer.replace_lines(0, 1, ["a"])
        assert buffer.undo_depth == 0

    def test_transaction_closes_on_error(self) -> None:
        buffer = LineBuffer(["a"])
        with pytest.raises(BufferRangeError), buffer.transact():
            buffer.insert_line(1, "b")
            buffer.get_line(5)
        assert buffer.undo_depth == 1
        buffer.insert_line(0, "c")
        assert buffer.undo_depth == 2

    def test_undo_empty(self) -> None:
        assert LineBuffer().undo() is False

    def test_undo_clips_cursor(self) -> None:
        buffer = LineBuffer(["a"])
        buffer.insert_line(1, "bbbb")
        buffer.set_cursor_position(Point(1, 3))
        buffer.undo()
        assert buffer.get_cursor_position() == Point(0, 1)
