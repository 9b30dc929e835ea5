"""Table editing commands.

TableEditor implements every command on top of a TextEditor. All commands
share one shape:

1. Find the table around the cursor and the cursor's focus in it.
2. Complete the table (shifting the focus if an alignment row appears).
3. Apply the command's change to the table and the focus.
4. Format the table and recompute the focus offset in the new text.
5. Write the changed lines and place the cursor (or select the cell),
   inside one transaction so a single undo reverts the command.

Commands never raise for ordinary conditions: without a table at the
cursor they do nothing, and a focus that cannot be placed falls back to
the start of the table.

Thread Safety:
Not thread-safe. A TableEditor is driven from the host editor's event
loop and owns its smart cursor state.

"""

from __future__ import annotations

import difflib
from collections.abc import Sequence
from dataclasses import dataclass

from mesita.completion import complete_table
from mesita.config import Alignment, TableOptions
from mesita.edits import (
    clear_row,
    delete_column,
    delete_row,
    empty_row,
    insert_column,
    insert_row,
    move_column,
    move_row,
    single_empty_column,
)
from mesita.editor import TextEditor
from mesita.formatter import FormattedTable, alter_alignment, format_table
from mesita.location import Focus, Point, Range
from mesita.parser import is_table_row, read_table
from mesita.smart_cursor import SmartCursor
from mesita.table import Table, TableCell
from mesita.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TableInfo:
    """A table found around the cursor.

    Attributes:
        range: Buffer range covered by the table's lines
        lines: The table's lines as found in the buffer
        table: The table read from ``lines``
        focus: Focus of the cursor in ``table``

    """

    range: Range
    lines: tuple[str, ...]
    table: Table
    focus: Focus

    @property
    def start_row(self) -> int:
        return self.range.start.row


def _clamp(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


def _compute_new_offset(
    focus: Focus, table: Table, formatted: FormattedTable, moved: bool
) -> int:
    """Offset of the focus in the formatted cell.

    When the focus stayed in its cell, the cursor keeps its position in the
    content (clamped to the new content). When it moved to another cell it
    goes to the start of the content. In a margin it goes to the end of
    the left margin.
    """
    formatted_cell = formatted.table.cell_at(focus.row, focus.column)
    if moved:
        if formatted_cell is not None:
            return formatted_cell.compute_raw_offset(0)
    else:
        cell = table.cell_at(focus.row, focus.column)
        if cell is not None and formatted_cell is not None:
            content_offset = min(
                cell.compute_content_offset(focus.offset),
                len(formatted_cell.content),
            )
            return formatted_cell.compute_raw_offset(content_offset)
    return len(formatted.margin_left) if focus.column < 0 else 0


class TableEditor:
    """Editing commands for the pipe table under the cursor.

    Args:
        text_editor: The host editor

    Example:
        >>> from mesita import LineBuffer, Point, TableOptions
        >>> buffer = LineBuffer(["| a | b |"], cursor=Point(0, 2))
        >>> editor = TableEditor(buffer)
        >>> editor.next_cell(TableOptions())
        >>> buffer.lines
        ['| a   | b   |', '| --- | --- |']

    """

    __slots__ = ("_smart_cursor", "_text_editor")

    def __init__(self, text_editor: TextEditor) -> None:
        self._text_editor = text_editor
        self._smart_cursor = SmartCursor()

    @property
    def smart_cursor(self) -> SmartCursor:
        return self._smart_cursor

    # -------------------------------------------------------------------------
    # Table discovery
    # -------------------------------------------------------------------------

    def cursor_is_in_table(self, options: TableOptions) -> bool:
        """Return True if the cursor's line is a table row the host lets us edit."""
        te = self._text_editor
        row = te.get_cursor_position().row
        return te.accepts_table_edit(row) and is_table_row(te.get_line(row), options)

    def reset_smart_cursor(self) -> None:
        """Forget the smart cursor column.

        Hosts call this when the cursor moves for reasons other than a
        TableEditor command.
        """
        if self._smart_cursor.is_active:
            logger.debug("Smart cursor reset")
        self._smart_cursor.reset()

    def find_table(self, options: TableOptions) -> TableInfo | None:
        """Find the table around the cursor.

        Returns:
            TableInfo, or None if the cursor's line is not a table row
        """
        te = self._text_editor
        pos = te.get_cursor_position()
        line = te.get_line(pos.row)
        if not is_table_row(line, options):
            return None
        lines = [line]
        start_row = pos.row
        for row in range(pos.row - 1, -1, -1):
            line = te.get_line(row)
            if not is_table_row(line, options):
                break
            lines.insert(0, line)
            start_row = row
        end_row = pos.row
        for row in range(pos.row + 1, te.get_last_row() + 1):
            line = te.get_line(row)
            if not is_table_row(line, options):
                break
            lines.append(line)
            end_row = row
        table = read_table(lines, options)
        return TableInfo(
            range=Range(Point(start_row, 0), Point(end_row, len(lines[-1]))),
            lines=tuple(lines),
            table=table,
            focus=table.focus_of_position(pos, start_row),
        )

    def _with_table(self, options: TableOptions) -> TableInfo | None:
        info = self.find_table(options)
        if info is None:
            logger.debug("No table at %s", self._text_editor.get_cursor_position())
            self.reset_smart_cursor()
        return info

    @staticmethod
    def _complete(info: TableInfo, options: TableOptions) -> tuple[Table, Focus]:
        completed = complete_table(info.table, options)
        focus = info.focus
        if completed.delimiter_inserted and focus.row > 0:
            focus = focus.with_row(focus.row + 1)
        return completed.table, focus

    # -------------------------------------------------------------------------
    # Buffer updates
    # -------------------------------------------------------------------------

    def _update_lines(
        self, start_row: int, new_lines: Sequence[str], old_lines: Sequence[str]
    ) -> int:
        """Rewrite the lines that changed.

        Returns:
            Number of lines touched
        """
        te = self._text_editor
        old = list(old_lines)
        new = list(new_lines)
        if old == new:
            return 0
        touched = 0
        matcher = difflib.SequenceMatcher(a=old, b=new, autojunk=False)
        # Bottom-up, so rows above each edit keep their indices
        for tag, i1, i2, j1, j2 in reversed(matcher.get_opcodes()):
            if tag == "equal":
                continue
            if tag == "replace":
                te.replace_lines(start_row + i1, start_row + i2, new[j1:j2])
            elif tag == "delete":
                for row in range(start_row + i2 - 1, start_row + i1 - 1, -1):
                    te.delete_line(row)
            elif tag == "insert":
                for line in reversed(new[j1:j2]):
                    te.insert_line(start_row + i1, line)
            touched += max(i2 - i1, j2 - j1)
        logger.debug("Updated %d line(s) from row %d", touched, start_row)
        return touched

    def _move_to_focus(self, start_row: int, table: Table, focus: Focus) -> None:
        pos = table.position_of_focus(focus, start_row)
        if pos is None:
            pos = Point(start_row, 0)
        self._text_editor.set_cursor_position(pos)

    def _select_focus(self, start_row: int, table: Table, focus: Focus) -> None:
        selection = table.selection_range_of_focus(focus, start_row)
        if selection is not None:
            self._text_editor.set_selection_range(selection)
        else:
            self._move_to_focus(start_row, table, focus)

    def _apply(
        self,
        info: TableInfo,
        formatted: FormattedTable,
        focus: Focus,
        *,
        select: bool = False,
    ) -> None:
        with self._text_editor.transact():
            self._update_lines(info.start_row, formatted.table.to_lines(), info.lines)
            if select:
                self._select_focus(info.start_row, formatted.table, focus)
            else:
                self._move_to_focus(info.start_row, formatted.table, focus)

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    def format(self, options: TableOptions) -> None:
        """Format the table, keeping the cursor in its cell."""
        info = self._with_table(options)
        if info is None:
            return
        self.reset_smart_cursor()
        table, focus = self._complete(info, options)
        formatted = format_table(table, options)
        focus = focus.with_offset(_compute_new_offset(focus, table, formatted, False))
        self._apply(info, formatted, focus)

    def format_all(self, options: TableOptions) -> None:
        """Format every table in the buffer.

        Lines the host does not accept for table editing end a table. The
        cursor stays in its cell when it is inside a table; otherwise it
        keeps its line, shifted by lines inserted above it.
        """
        te = self._text_editor
        self.reset_smart_cursor()
        pos = te.get_cursor_position()

        blocks: list[tuple[int, list[str]]] = []
        current: list[str] = []
        start_row = 0
        for row in range(te.get_last_row() + 1):
            line = te.get_line(row)
            if te.accepts_table_edit(row) and is_table_row(line, options):
                if not current:
                    start_row = row
                current.append(line)
            elif current:
                blocks.append((start_row, current))
                current = []
        if current:
            blocks.append((start_row, current))
        if not blocks:
            return

        deltas: list[int] = []
        focused: tuple[int, Table, Focus] | None = None
        with te.transact():
            for index in range(len(blocks) - 1, -1, -1):
                block_start, lines = blocks[index]
                table = read_table(lines, options)
                completed = complete_table(table, options)
                formatted = format_table(completed.table, options)
                if table.contains_row(pos, block_start):
                    focus = table.focus_of_position(pos, block_start)
                    if completed.delimiter_inserted and focus.row > 0:
                        focus = focus.with_row(focus.row + 1)
                    focus = focus.with_offset(
                        _compute_new_offset(focus, completed.table, formatted, False)
                    )
                    focused = (index, formatted.table, focus)
                new_lines = formatted.table.to_lines()
                self._update_lines(block_start, new_lines, lines)
                deltas.insert(0, len(new_lines) - len(lines))

            if focused is not None:
                index, table, focus = focused
                shift = sum(deltas[:index])
                self._move_to_focus(blocks[index][0] + shift, table, focus)
            else:
                shift = sum(
                    delta
                    for (block_start, lines), delta in zip(blocks, deltas, strict=True)
                    if block_start + len(lines) <= pos.row
                )
                te.set_cursor_position(Point(pos.row + shift, pos.column))
        logger.debug("Formatted %d table(s)", len(blocks))

    def escape(self, options: TableOptions) -> None:
        """Format the table and move the cursor to the line after it.

        A new empty line is appended when the table ends the buffer.
        """
        info = self._with_table(options)
        if info is None:
            return
        self.reset_smart_cursor()
        table, _ = self._complete(info, options)
        formatted = format_table(table, options)
        te = self._text_editor
        with te.transact():
            self._update_lines(info.start_row, formatted.table.to_lines(), info.lines)
            row = info.start_row + formatted.table.height
            if row > te.get_last_row():
                te.insert_line(row, "")
            te.set_cursor_position(Point(row, 0))

    def align_column(self, alignment: Alignment, options: TableOptions) -> None:
        """Set the alignment of the focused column and format the table."""
        info = self._with_table(options)
        if info is None:
            return
        self.reset_smart_cursor()
        table, focus = self._complete(info, options)
        altered = table
        if 0 <= focus.column < table.header_width:
            altered = alter_alignment(table, focus.column, alignment, options)
        formatted = format_table(altered, options)
        focus = focus.with_offset(_compute_new_offset(focus, altered, formatted, False))
        self._apply(info, formatted, focus)

    def select_cell(self, options: TableOptions) -> None:
        """Format the table and select the content of the focused cell."""
        info = self._with_table(options)
        if info is None:
            return
        self.reset_smart_cursor()
        table, focus = self._complete(info, options)
        formatted = format_table(table, options)
        focus = focus.with_offset(_compute_new_offset(focus, table, formatted, False))
        self._apply(info, formatted, focus, select=True)

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def move_focus(self, row_offset: int, column_offset: int, options: TableOptions) -> None:
        """Move the focus by a number of rows and columns.

        Row moves skip the alignment row and stop at the first and last
        rows; column moves stop at the first and last header columns. A
        focus already in a margin does not move further out.
        """
        info = self._with_table(options)
        if info is None:
            return
        self.reset_smart_cursor()
        table, focus = self._complete(info, options)
        start_focus = focus
        if row_offset != 0:
            height = table.height
            row = focus.row
            if row < 1 and row + row_offset >= 1:
                skip = 1
            elif row > 1 and row + row_offset <= 1:
                skip = -1
            else:
                skip = 0
            last_row = 0 if height <= 2 else height - 1
            focus = focus.with_row(_clamp(row + row_offset + skip, 0, last_row))
        if column_offset != 0:
            width = table.header_width
            outward = (focus.column < 0 and column_offset < 0) or (
                focus.column > width - 1 and column_offset > 0
            )
            if not outward:
                focus = focus.with_column(_clamp(focus.column + column_offset, 0, width - 1))
        moved = not focus.pos_equals(start_focus)
        formatted = format_table(table, options)
        focus = focus.with_offset(_compute_new_offset(focus, table, formatted, moved))
        self._apply(info, formatted, focus, select=moved)

    def _row_transition_column(self, options: TableOptions, width: int) -> int:
        if options.smart_cursor:
            column = self._smart_cursor.remembered_column()
            if column is not None:
                return _clamp(column, 0, width - 1)
        return 0

    def _start_sequence(
        self, info: TableInfo, start_focus: Focus, width: int, options: TableOptions
    ) -> None:
        if not options.smart_cursor or not self._smart_cursor.continues(
            info.range.start, info.focus
        ):
            self.reset_smart_cursor()
        if not options.smart_cursor:
            return
        column = _clamp(start_focus.column, 0, width - 1)
        if self._smart_cursor.activate(column, info.range.start, start_focus):
            logger.debug("Smart cursor remembers column %d", column)

    def _end_sequence(self, info: TableInfo, focus: Focus, options: TableOptions) -> None:
        if options.smart_cursor:
            self._smart_cursor.advance(info.range.start, focus)

    def next_cell(self, options: TableOptions) -> None:
        """Move to the next cell, left to right and top to bottom.

        The alignment row is skipped. Past the last column of the header
        (or from its right margin) a new column is appended to every row and
        focused. Past the last column of a body row the focus goes to the
        next row (column 0, or the smart cursor column); past the last row
        an empty row is appended.
        """
        info = self._with_table(options)
        if info is None:
            return
        table, focus = self._complete(info, options)
        start_focus = focus
        width = table.header_width
        altered = table
        self._start_sequence(info, start_focus, width, options)

        if focus.row == 1:
            focus = Focus(2, self._row_transition_column(options, width))
        elif focus.column < 0:
            focus = focus.with_column(0)
        elif focus.column > width - 1 or (focus.row == 0 and focus.column == width - 1):
            cells = [TableCell("") for _ in range(table.height - 1)]
            altered = insert_column(altered, width, cells, options)
            focus = focus.with_column(width)
        elif focus.column < width - 1:
            focus = focus.with_column(focus.column + 1)
        else:
            focus = Focus(focus.row + 1, self._row_transition_column(options, width))
        if focus.row > altered.height - 1:
            altered = insert_row(altered, altered.height, empty_row(altered.header_width))

        formatted = format_table(altered, options)
        focus = focus.with_offset(_compute_new_offset(focus, altered, formatted, True))
        self._apply(info, formatted, focus, select=True)
        self._end_sequence(info, focus, options)

    def previous_cell(self, options: TableOptions) -> None:
        """Move to the previous cell, right to left and bottom to top.

        The alignment row is skipped. Before the first column of a body
        row the focus goes to the last column of the row above; the first
        cell of the header is the end of the road.
        """
        info = self._with_table(options)
        if info is None:
            return
        self.reset_smart_cursor()
        table, focus = self._complete(info, options)
        start_focus = focus
        width = table.header_width

        if focus.row == 1:
            focus = Focus(0, width - 1)
        elif focus.column > width - 1:
            focus = focus.with_column(width - 1)
        elif focus.column > 0:
            focus = focus.with_column(focus.column - 1)
        elif focus.row == 0:
            focus = focus.with_column(0)
        else:
            focus = Focus(0 if focus.row == 2 else focus.row - 1, width - 1)

        moved = not focus.pos_equals(start_focus)
        formatted = format_table(table, options)
        focus = focus.with_offset(_compute_new_offset(focus, table, formatted, moved))
        self._apply(info, formatted, focus, select=moved)

    def next_row(self, options: TableOptions) -> None:
        """Move to the next row.

        The alignment row is skipped and an empty row is appended past the
        last row. The column is 0, or the smart cursor column.
        """
        info = self._with_table(options)
        if info is None:
            return
        table, focus = self._complete(info, options)
        width = table.header_width
        altered = table
        self._start_sequence(info, focus, width, options)

        next_row = 2 if focus.row == 0 else focus.row + 1
        focus = Focus(next_row, self._row_transition_column(options, width))
        if focus.row > altered.height - 1:
            altered = insert_row(altered, altered.height, empty_row(width))

        formatted = format_table(altered, options)
        focus = focus.with_offset(_compute_new_offset(focus, altered, formatted, True))
        self._apply(info, formatted, focus, select=True)
        self._end_sequence(info, focus, options)

    # -------------------------------------------------------------------------
    # Rows
    # -------------------------------------------------------------------------

    def insert_row(self, options: TableOptions) -> None:
        """Insert an empty body row below the focused row and move into it."""
        info = self._with_table(options)
        if info is None:
            return
        self.reset_smart_cursor()
        table, focus = self._complete(info, options)
        width = table.header_width
        index = max(focus.row + 1, 2)
        altered = insert_row(table, index, empty_row(width))
        column = focus.column if 0 <= focus.column < width else 0
        focus = Focus(index, column)
        formatted = format_table(altered, options)
        focus = focus.with_offset(_compute_new_offset(focus, altered, formatted, True))
        self._apply(info, formatted, focus)

    def delete_row(self, options: TableOptions) -> None:
        """Delete the focused body row.

        On the header the cells are cleared instead; on the alignment row
        nothing is deleted.
        """
        info = self._with_table(options)
        if info is None:
            return
        self.reset_smart_cursor()
        table, focus = self._complete(info, options)
        altered = table
        moved = False
        if focus.row == 0:
            altered = clear_row(table, 0)
            moved = True
        elif focus.row > 1:
            altered = delete_row(table, focus.row)
            moved = True
            if focus.row > altered.height - 1:
                focus = focus.with_row(0 if focus.row == 2 else focus.row - 1)
        formatted = format_table(altered, options)
        focus = focus.with_offset(_compute_new_offset(focus, altered, formatted, moved))
        self._apply(info, formatted, focus)

    def move_row(self, offset: int, options: TableOptions) -> None:
        """Move the focused body row up (negative) or down (positive).

        Body rows never move above the alignment row; at a boundary the
        table is only formatted.
        """
        info = self._with_table(options)
        if info is None:
            return
        self.reset_smart_cursor()
        table, focus = self._complete(info, options)
        altered = table
        if focus.row > 1:
            dest = focus.row + offset
            if 2 <= dest <= table.height - 1:
                altered = move_row(table, focus.row, dest)
                focus = focus.with_row(dest)
        formatted = format_table(altered, options)
        focus = focus.with_offset(_compute_new_offset(focus, altered, formatted, False))
        self._apply(info, formatted, focus)

    def move_row_up(self, options: TableOptions) -> None:
        self.move_row(-1, options)

    def move_row_down(self, options: TableOptions) -> None:
        self.move_row(1, options)

    # -------------------------------------------------------------------------
    # Columns
    # -------------------------------------------------------------------------

    def insert_column(self, options: TableOptions) -> None:
        """Insert an empty column right of the focused column and move into it."""
        info = self._with_table(options)
        if info is None:
            return
        self.reset_smart_cursor()
        table, focus = self._complete(info, options)
        width = table.header_width
        index = 0 if focus.column < 0 else min(focus.column + 1, width)
        cells = [TableCell("") for _ in range(table.height - 1)]
        altered = insert_column(table, index, cells, options)
        focus = Focus(focus.row, index)
        formatted = format_table(altered, options)
        focus = focus.with_offset(_compute_new_offset(focus, altered, formatted, True))
        self._apply(info, formatted, focus)

    def delete_column(self, options: TableOptions) -> None:
        """Delete the focused column.

        Deleting the only column leaves one empty column behind.
        """
        info = self._with_table(options)
        if info is None:
            return
        self.reset_smart_cursor()
        table, focus = self._complete(info, options)
        width = table.header_width
        altered = table
        moved = False
        if 0 <= focus.column < width:
            if width == 1:
                altered = single_empty_column(table, options)
            else:
                altered = delete_column(table, focus.column)
                focus = focus.with_column(min(focus.column, width - 2))
            moved = True
        formatted = format_table(altered, options)
        focus = focus.with_offset(_compute_new_offset(focus, altered, formatted, moved))
        self._apply(info, formatted, focus)

    def move_column(self, offset: int, options: TableOptions) -> None:
        """Move the focused column left (negative) or right (positive)."""
        info = self._with_table(options)
        if info is None:
            return
        self.reset_smart_cursor()
        table, focus = self._complete(info, options)
        width = table.header_width
        altered = table
        if 0 <= focus.column < width:
            dest = focus.column + offset
            if 0 <= dest < width:
                altered = move_column(table, focus.column, dest)
                focus = focus.with_column(dest)
        formatted = format_table(altered, options)
        focus = focus.with_offset(_compute_new_offset(focus, altered, formatted, False))
        self._apply(info, formatted, focus)

    def move_column_left(self, options: TableOptions) -> None:
        self.move_column(-1, options)

    def move_column_right(self, options: TableOptions) -> None:
        self.move_column(1, options)

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def export_table(
        self, options: TableOptions, *, with_headers: bool = True
    ) -> list[list[str]] | None:
        """Return the cell contents of the completed table, row by row.

        The alignment row is left out, and so is the header unless
        ``with_headers`` is set. The buffer is not modified.

        Returns:
            Rows of cell contents, or None if there is no table
        """
        info = self._with_table(options)
        if info is None:
            return None
        self.reset_smart_cursor()
        table, _ = self._complete(info, options)
        rows = [row for i, row in enumerate(table.rows) if i != 1]
        if not with_headers:
            rows = rows[1:]
        return [[cell.content for cell in row.cells] for row in rows]


__all__ = ["TableEditor", "TableInfo"]
