"""Tests for TableEditor commands, driven through a LineBuffer."""

import logging

import pytest

from mesita.commands import TableEditor
from mesita.config import Alignment, TableOptions
from mesita.editor import LineBuffer
from mesita.location import Point, Range

FORMATTED = [
    "| a   | b   |",
    "| --- | --- |",
    "| c   | d   |",
]

FOUR_ROWS = [*FORMATTED, "| e   | f   |"]

WIDE = [
    "| a   | b   | c   | d   |",
    "| --- | --- | --- | --- |",
    "| e   | f   | g   | h   |",
]

THREE_COLUMNS = [
    "| a   | b   | c   |",
    "| --- | --- | --- |",
    "| d   | e   | f   |",
]


def _editor(text: str | list[str], cursor: Point) -> tuple[LineBuffer, TableEditor]:
    buffer = LineBuffer(text, cursor=cursor)
    return buffer, TableEditor(buffer)


# =========================================================================
# Table discovery
# =========================================================================


class TestFindTable:
    """find_table() and cursor_is_in_table()."""

    def test_finds_surrounding_lines(self) -> None:
        buffer, editor = _editor(["text", *FORMATTED, "", "more"], Point(2, 3))
        info = editor.find_table(TableOptions())
        assert info is not None
        assert info.range == Range(Point(1, 0), Point(3, len(FORMATTED[2])))
        assert info.lines == tuple(FORMATTED)
        assert info.focus.pos == (1, 0)

    def test_no_table(self) -> None:
        _, editor = _editor(["text", *FORMATTED], Point(0, 1))
        assert editor.find_table(TableOptions()) is None

    def test_cursor_is_in_table(self) -> None:
        _, editor = _editor(["text", *FORMATTED], Point(1, 1))
        assert editor.cursor_is_in_table(TableOptions())

    def test_cursor_is_not_in_table(self) -> None:
        _, editor = _editor(["text", *FORMATTED], Point(0, 1))
        assert not editor.cursor_is_in_table(TableOptions())

    def test_host_rejects_table_edit(self) -> None:
        buffer = LineBuffer(FORMATTED, cursor=Point(0, 2), accepts_table_edit=lambda row: False)
        assert not TableEditor(buffer).cursor_is_in_table(TableOptions())

    def test_left_margin_chars(self) -> None:
        options = TableOptions(left_margin_chars=frozenset(">"))
        _, editor = _editor(["> | a |", "> | b |"], Point(1, 4))
        info = editor.find_table(options)
        assert info is not None
        assert info.table.height == 2


# =========================================================================
# Formatting commands
# =========================================================================


class TestFormat:
    """format(), escape(), align_column() and select_cell()."""

    def test_format(self) -> None:
        buffer, editor = _editor("| A | B |\n | --- | ----- |\n  | C | D |  \n", Point(2, 5))
        editor.format(TableOptions(min_delimiter_width=3))
        assert buffer.lines == ["| A   | B   |", "| --- | --- |", "| C   | D   |", ""]
        assert buffer.get_cursor_position() == Point(2, 3)

    def test_format_inserts_alignment_row(self) -> None:
        buffer, editor = _editor("| a | b |\n| c | d |", Point(1, 2))
        editor.format(TableOptions())
        assert buffer.lines == FORMATTED
        assert buffer.get_cursor_position() == Point(2, 2)

    def test_format_in_left_margin(self) -> None:
        buffer, editor = _editor(["  | a |"], Point(0, 1))
        editor.format(TableOptions())
        assert buffer.lines == ["  | a   |", "  | --- |"]
        assert buffer.get_cursor_position() == Point(0, 2)

    def test_format_is_one_undo_step(self) -> None:
        buffer, editor = _editor("| a | b |\n| c | d |", Point(0, 2))
        editor.format(TableOptions())
        assert buffer.undo_depth == 1
        buffer.undo()
        assert buffer.lines == ["| a | b |", "| c | d |"]

    def test_format_formatted_table_changes_nothing(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(0, 2))
        editor.format(TableOptions())
        assert buffer.lines == FORMATTED
        assert buffer.undo_depth == 0

    def test_no_table_is_a_no_op(self) -> None:
        buffer, editor = _editor(["text"], Point(0, 2))
        editor.format(TableOptions())
        assert buffer.lines == ["text"]
        assert buffer.get_cursor_position() == Point(0, 2)

    def test_escape_appends_line(self) -> None:
        buffer, editor = _editor("| a |\n| b |", Point(0, 2))
        editor.escape(TableOptions())
        assert buffer.lines == ["| a   |", "| --- |", "| b   |", ""]
        assert buffer.get_cursor_position() == Point(3, 0)

    def test_escape_moves_below_table(self) -> None:
        buffer, editor = _editor("| a |\n|---|\ntext", Point(0, 2))
        editor.escape(TableOptions())
        assert buffer.lines == ["| a   |", "| --- |", "text"]
        assert buffer.get_cursor_position() == Point(2, 0)

    def test_align_column(self) -> None:
        buffer, editor = _editor("| a | b |\n|---|---|", Point(0, 7))
        editor.align_column(Alignment.RIGHT, TableOptions())
        assert buffer.lines == ["| a   |   b |", "| --- | ---:|"]
        assert buffer.get_cursor_position() == Point(0, 11)

    def test_align_column_in_margin(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(0, 0))
        editor.align_column(Alignment.CENTER, TableOptions())
        assert buffer.lines == FORMATTED

    def test_select_cell(self) -> None:
        buffer, editor = _editor(["| foo | b |"], Point(0, 2))
        editor.select_cell(TableOptions())
        assert buffer.lines == ["| foo | b   |", "| --- | --- |"]
        assert buffer.selection == Range(Point(0, 2), Point(0, 5))


class TestFormatAll:
    """format_all() over the whole buffer."""

    TEXT = ["| a | b |", "| c | d |", "", "text", "| x |"]

    def test_formats_every_table(self) -> None:
        buffer, editor = _editor(self.TEXT, Point(4, 2))
        editor.format_all(TableOptions())
        assert buffer.lines == [*FORMATTED, "", "text", "| x   |", "| --- |"]
        assert buffer.get_cursor_position() == Point(5, 2)
        assert buffer.undo_depth == 1

    def test_cursor_outside_tables_is_shifted(self) -> None:
        buffer, editor = _editor(self.TEXT, Point(3, 1))
        editor.format_all(TableOptions())
        assert buffer.get_cursor_position() == Point(4, 1)

    def test_skips_rejected_lines(self) -> None:
        buffer = LineBuffer(self.TEXT, cursor=Point(3, 1), accepts_table_edit=lambda row: row != 4)
        TableEditor(buffer).format_all(TableOptions())
        assert buffer.lines == [*FORMATTED, "", "text", "| x |"]

    def test_no_tables(self) -> None:
        buffer, editor = _editor(["a", "b"], Point(1, 1))
        editor.format_all(TableOptions())
        assert buffer.lines == ["a", "b"]
        assert buffer.undo_depth == 0


# =========================================================================
# Navigation
# =========================================================================


class TestMoveFocus:
    """move_focus() row and column moves."""

    def test_down_skips_alignment_row(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(0, 2))
        editor.move_focus(1, 0, TableOptions())
        assert buffer.selection == Range(Point(2, 2), Point(2, 3))

    def test_up_skips_alignment_row(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(2, 2))
        editor.move_focus(-1, 0, TableOptions())
        assert buffer.selection == Range(Point(0, 2), Point(0, 3))

    def test_right(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(0, 2))
        editor.move_focus(0, 1, TableOptions())
        assert buffer.selection == Range(Point(0, 8), Point(0, 9))

    def test_clamped_left_does_not_move(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(0, 2))
        editor.move_focus(0, -1, TableOptions())
        assert buffer.selection is None
        assert buffer.get_cursor_position() == Point(0, 2)

    def test_clamped_to_last_row(self) -> None:
        buffer, editor = _editor(FOUR_ROWS, Point(0, 2))
        editor.move_focus(10, 0, TableOptions())
        assert buffer.selection == Range(Point(3, 2), Point(3, 3))

    def test_header_only_table(self) -> None:
        buffer, editor = _editor(FORMATTED[:2], Point(0, 2))
        editor.move_focus(1, 0, TableOptions())
        assert buffer.selection is None
        assert buffer.get_cursor_position() == Point(0, 2)


class TestNextCell:
    """next_cell() traversal."""

    def test_next_column(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(0, 2))
        editor.next_cell(TableOptions())
        assert buffer.selection == Range(Point(0, 8), Point(0, 9))

    def test_appends_column_past_last_header_column(self) -> None:
        buffer, editor = _editor("| a | b |\n| c | d |", Point(0, 6))
        editor.next_cell(TableOptions())
        assert buffer.lines == [
            "| a   | b   |     |",
            "| --- | --- | --- |",
            "| c   | d   |     |",
        ]
        assert buffer.selection is None
        assert buffer.get_cursor_position() == Point(0, 14)

    def test_typing_a_header_adds_columns(self) -> None:
        buffer, editor = _editor("| Name", Point(0, 6))
        editor.next_cell(TableOptions())
        assert buffer.lines == ["| Name |     |", "| ---- | --- |"]
        assert buffer.get_cursor_position() == Point(0, 9)

    def test_wraps_body_row(self) -> None:
        buffer, editor = _editor(FOUR_ROWS, Point(2, 8))
        editor.next_cell(TableOptions())
        assert buffer.lines == FOUR_ROWS
        assert buffer.selection == Range(Point(3, 2), Point(3, 3))

    def test_appends_row_past_last_row(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(2, 8))
        editor.next_cell(TableOptions())
        assert buffer.lines == [*FORMATTED, "|     |     |"]
        assert buffer.selection is None
        assert buffer.get_cursor_position() == Point(3, 2)

    def test_appends_column_from_right_margin(self) -> None:
        buffer, editor = _editor(["| a   |", "| --- |"], Point(0, 7))
        editor.next_cell(TableOptions())
        assert buffer.lines == ["| a   |     |", "| --- | --- |"]
        assert buffer.get_cursor_position() == Point(0, 8)

    def test_from_alignment_row(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(1, 2))
        editor.next_cell(TableOptions())
        assert buffer.selection == Range(Point(2, 2), Point(2, 3))

    def test_from_left_margin(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(2, 0))
        editor.next_cell(TableOptions())
        assert buffer.selection == Range(Point(2, 2), Point(2, 3))

    def test_is_one_undo_step(self) -> None:
        buffer, editor = _editor("| a | b |", Point(0, 6))
        editor.next_cell(TableOptions())
        assert buffer.undo_depth == 1
        buffer.undo()
        assert buffer.lines == ["| a | b |"]


class TestPreviousCell:
    """previous_cell() traversal."""

    def test_previous_column(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(0, 8))
        editor.previous_cell(TableOptions())
        assert buffer.selection == Range(Point(0, 2), Point(0, 3))

    def test_wraps_to_header(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(2, 2))
        editor.previous_cell(TableOptions())
        assert buffer.selection == Range(Point(0, 8), Point(0, 9))

    def test_wraps_to_previous_body_row(self) -> None:
        buffer, editor = _editor(FOUR_ROWS, Point(3, 2))
        editor.previous_cell(TableOptions())
        assert buffer.selection == Range(Point(2, 8), Point(2, 9))

    def test_stops_at_first_cell(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(0, 2))
        editor.previous_cell(TableOptions())
        assert buffer.selection is None
        assert buffer.get_cursor_position() == Point(0, 2)


class TestNextRow:
    """next_row() traversal."""

    def test_skips_alignment_row(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(0, 8))
        editor.next_row(TableOptions())
        assert buffer.selection == Range(Point(2, 2), Point(2, 3))

    def test_appends_row(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(2, 2))
        editor.next_row(TableOptions())
        assert buffer.lines == [*FORMATTED, "|     |     |"]
        assert buffer.get_cursor_position() == Point(3, 2)


class TestSmartCursor:
    """Column memory across next_cell/next_row sequences."""

    def test_next_row_returns_to_start_column(self) -> None:
        options = TableOptions(smart_cursor=True)
        buffer, editor = _editor(WIDE, Point(0, 14))
        editor.next_cell(options)
        assert buffer.selection == Range(Point(0, 20), Point(0, 21))
        assert editor.smart_cursor.remembered_column() == 2
        editor.next_row(options)
        assert buffer.selection == Range(Point(2, 14), Point(2, 15))

    def test_other_command_clears_memory(self) -> None:
        """After a move the next sequence starts from the new column."""
        options = TableOptions(smart_cursor=True)
        buffer, editor = _editor(WIDE, Point(0, 14))
        editor.next_cell(options)
        editor.move_focus(0, -3, options)
        assert not editor.smart_cursor.is_active
        editor.next_row(options)
        assert buffer.selection == Range(Point(2, 2), Point(2, 3))

    def test_move_left_replaces_remembered_column(self) -> None:
        options = TableOptions(smart_cursor=True)
        buffer, editor = _editor(WIDE, Point(0, 14))
        editor.next_cell(options)
        editor.move_focus(0, -2, options)
        editor.next_row(options)
        assert buffer.selection == Range(Point(2, 8), Point(2, 9))

    def test_outside_cursor_move_clears_memory(self) -> None:
        options = TableOptions(smart_cursor=True)
        buffer, editor = _editor(WIDE, Point(0, 14))
        editor.next_cell(options)
        buffer.set_cursor_position(Point(0, 8))
        editor.next_row(options)
        assert buffer.selection == Range(Point(2, 8), Point(2, 9))

    def test_first_next_row_keeps_column(self) -> None:
        options = TableOptions(smart_cursor=True)
        buffer, editor = _editor(THREE_COLUMNS, Point(2, 8))
        editor.next_row(options)
        assert buffer.lines == [*THREE_COLUMNS, "|     |     |     |"]
        assert buffer.get_cursor_position() == Point(3, 8)
        assert editor.smart_cursor.remembered_column() == 1

    def test_first_wrapping_next_cell_keeps_column(self) -> None:
        options = TableOptions(smart_cursor=True)
        buffer, editor = _editor(THREE_COLUMNS, Point(2, 14))
        editor.next_cell(options)
        assert buffer.lines == [*THREE_COLUMNS, "|     |     |     |"]
        assert buffer.get_cursor_position() == Point(3, 14)

    def test_sequence_keeps_first_column(self) -> None:
        options = TableOptions(smart_cursor=True)
        buffer, editor = _editor(THREE_COLUMNS, Point(0, 8))
        editor.next_cell(options)
        editor.next_row(options)
        assert buffer.selection == Range(Point(2, 8), Point(2, 9))
        editor.next_row(options)
        assert buffer.get_cursor_position() == Point(3, 8)

    def test_disabled(self) -> None:
        buffer, editor = _editor(WIDE, Point(0, 14))
        editor.next_cell(TableOptions())
        editor.next_row(TableOptions())
        assert buffer.selection == Range(Point(2, 2), Point(2, 3))
        assert not editor.smart_cursor.is_active

    def test_reset_smart_cursor(self) -> None:
        options = TableOptions(smart_cursor=True)
        _, editor = _editor(WIDE, Point(0, 14))
        editor.next_cell(options)
        editor.reset_smart_cursor()
        assert not editor.smart_cursor.is_active


# =========================================================================
# Row and column editing
# =========================================================================


class TestRowCommands:
    """insert_row(), delete_row() and move_row()."""

    def test_insert_row_below_header(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(0, 8))
        editor.insert_row(TableOptions())
        assert buffer.lines == [*FORMATTED[:2], "|     |     |", FORMATTED[2]]
        assert buffer.get_cursor_position() == Point(2, 8)

    def test_insert_row_at_end(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(2, 2))
        editor.insert_row(TableOptions())
        assert buffer.lines == [*FORMATTED, "|     |     |"]
        assert buffer.get_cursor_position() == Point(3, 2)

    def test_delete_body_row(self) -> None:
        buffer, editor = _editor(FOUR_ROWS, Point(2, 2))
        editor.delete_row(TableOptions())
        assert buffer.lines == [*FORMATTED[:2], "| e   | f   |"]
        assert buffer.get_cursor_position() == Point(2, 2)

    def test_delete_last_row(self) -> None:
        buffer, editor = _editor(FOUR_ROWS, Point(3, 2))
        editor.delete_row(TableOptions())
        assert buffer.lines == FORMATTED
        assert buffer.get_cursor_position() == Point(2, 2)

    def test_delete_only_body_row(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(2, 2))
        editor.delete_row(TableOptions())
        assert buffer.lines == FORMATTED[:2]
        assert buffer.get_cursor_position() == Point(0, 2)

    def test_delete_header_clears_it(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(0, 8))
        editor.delete_row(TableOptions())
        assert buffer.lines == ["|     |     |", *FORMATTED[1:]]
        assert buffer.get_cursor_position() == Point(0, 8)

    def test_delete_alignment_row_is_refused(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(1, 2))
        editor.delete_row(TableOptions())
        assert buffer.lines == FORMATTED
        assert buffer.get_cursor_position() == Point(1, 2)

    def test_move_row_down(self) -> None:
        buffer, editor = _editor(FOUR_ROWS, Point(2, 3))
        editor.move_row_down(TableOptions())
        assert buffer.lines == [*FORMATTED[:2], "| e   | f   |", "| c   | d   |"]
        assert buffer.get_cursor_position() == Point(3, 3)

    def test_move_row_up_stops_below_alignment_row(self) -> None:
        buffer, editor = _editor(FOUR_ROWS, Point(2, 3))
        editor.move_row_up(TableOptions())
        assert buffer.lines == FOUR_ROWS
        assert buffer.get_cursor_position() == Point(2, 3)

    def test_move_header_is_refused(self) -> None:
        buffer, editor = _editor(FOUR_ROWS, Point(0, 2))
        editor.move_row(1, TableOptions())
        assert buffer.lines == FOUR_ROWS


class TestColumnCommands:
    """insert_column(), delete_column() and move_column()."""

    def test_insert_column(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(0, 2))
        editor.insert_column(TableOptions())
        assert buffer.lines == [
            "| a   |     | b   |",
            "| --- | --- | --- |",
            "| c   |     | d   |",
        ]
        assert buffer.get_cursor_position() == Point(0, 8)

    def test_insert_column_from_left_margin(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(2, 0))
        editor.insert_column(TableOptions())
        assert buffer.lines == [
            "|     | a   | b   |",
            "| --- | --- | --- |",
            "|     | c   | d   |",
        ]
        assert buffer.get_cursor_position() == Point(2, 2)

    def test_delete_column(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(0, 8))
        editor.delete_column(TableOptions())
        assert buffer.lines == ["| a   |", "| --- |", "| c   |"]
        assert buffer.get_cursor_position() == Point(0, 2)

    def test_delete_only_column_leaves_empty_column(self) -> None:
        buffer, editor = _editor(["| a   |", "| --- |", "| c   |"], Point(0, 2))
        editor.delete_column(TableOptions())
        assert buffer.lines == ["|     |", "| --- |", "|     |"]
        assert buffer.get_cursor_position() == Point(0, 2)

    def test_move_column_right(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(0, 3))
        editor.move_column_right(TableOptions())
        assert buffer.lines == ["| b   | a   |", "| --- | --- |", "| d   | c   |"]
        assert buffer.get_cursor_position() == Point(0, 9)

    def test_move_column_left_at_edge(self) -> None:
        buffer, editor = _editor(FORMATTED, Point(0, 3))
        editor.move_column_left(TableOptions())
        assert buffer.lines == FORMATTED


# =========================================================================
# Export and logging
# =========================================================================


class TestExportTable:
    """export_table() content grid."""

    def test_with_headers(self) -> None:
        buffer, editor = _editor("| a | b |\n|---|---|\n| c |", Point(0, 2))
        assert editor.export_table(TableOptions()) == [["a", "b"], ["c", ""]]
        assert buffer.lines == ["| a | b |", "|---|---|", "| c |"]

    def test_without_headers(self) -> None:
        _, editor = _editor("| a | b |\n| c | d |", Point(0, 2))
        assert editor.export_table(TableOptions(), with_headers=False) == [["c", "d"]]

    def test_no_table(self) -> None:
        _, editor = _editor("text", Point(0, 0))
        assert editor.export_table(TableOptions()) is None


class TestLogging:
    """Debug logging of the command layer."""

    def test_logs_missing_table(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="mesita")
        _, editor = _editor("text", Point(0, 0))
        editor.format(TableOptions())
        assert any(
            record.name == "mesita.commands" and "No table" in record.getMessage()
            for record in caplog.records
        )

    def test_logs_line_updates(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="mesita")
        _, editor = _editor("| a |", Point(0, 2))
        editor.format(TableOptions())
        assert any("Updated" in record.getMessage() for record in caplog.records)
