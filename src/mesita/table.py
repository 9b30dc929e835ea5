"""Pipe-table model for mesita.

Cells keep their raw text exactly as it appears between two pipes, so a
table read from the buffer serializes back to the same text and every
buffer column maps to exactly one cell (or margin) offset.

Model:
Table
└── TableRow (margin_left | cell | cell | ... | margin_right)
    └── TableCell (raw text, including surrounding whitespace)

Row 0 is the header. Row 1 is the alignment (delimiter) row when every one
of its cells is a delimiter cell; all other rows are body rows.

Thread Safety:
All types are frozen (immutable) and safe to share across threads.
Edits build new tables (see mesita.edits).

"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace

from mesita.config import Alignment
from mesita.location import Focus, Point, Range

_DELIMITER_CELL_RE = re.compile(r"^\s*:?-+:?\s*$")


@dataclass(frozen=True, slots=True)
class TableCell:
    """A single cell.

    Attributes:
        raw: Text between the two pipes, including whitespace

    """

    raw: str

    @property
    def content(self) -> str:
        """Cell text with surrounding whitespace removed."""
        return self.raw.strip()

    @property
    def padding_left(self) -> int:
        """Number of whitespace characters before the content."""
        return len(self.raw) - len(self.raw.lstrip())

    def to_text(self) -> str:
        return self.raw

    def is_delimiter(self) -> bool:
        """Return True if the cell is an alignment cell (``:?-+:?``)."""
        return _DELIMITER_CELL_RE.match(self.raw) is not None

    @property
    def alignment(self) -> Alignment:
        """Alignment encoded by the cell; DEFAULT for non-delimiter cells."""
        if not self.is_delimiter():
            return Alignment.DEFAULT
        content = self.content
        left = content.startswith(":")
        right = content.endswith(":")
        if left and right:
            return Alignment.CENTER
        if left:
            return Alignment.LEFT
        if right:
            return Alignment.RIGHT
        return Alignment.DEFAULT

    def compute_content_offset(self, raw_offset: int) -> int:
        """Convert an offset in ``raw`` to an offset in ``content``.

        The result is clamped to ``[0, len(content)]``.
        """
        content = self.content
        if content == "":
            return 0
        offset = raw_offset - self.padding_left
        return min(max(offset, 0), len(content))

    def compute_raw_offset(self, content_offset: int) -> int:
        """Convert an offset in ``content`` to an offset in ``raw``.

        An empty cell maps to 1 when it has any whitespace (just past the
        leading space a formatted cell always has), and to 0 otherwise.
        """
        if self.content == "":
            return 1 if self.raw else 0
        return self.padding_left + content_offset


@dataclass(frozen=True, slots=True)
class TableRow:
    """A table row.

    Attributes:
        cells: Cells in order
        margin_left: Text before the first pipe
        margin_right: Whitespace after the last pipe

    """

    cells: tuple[TableCell, ...]
    margin_left: str = ""
    margin_right: str = ""

    @property
    def width(self) -> int:
        return len(self.cells)

    def cell_at(self, index: int) -> TableCell | None:
        if 0 <= index < len(self.cells):
            return self.cells[index]
        return None

    def with_cells(self, cells: tuple[TableCell, ...]) -> TableRow:
        return replace(self, cells=cells)

    def is_delimiter_row(self) -> bool:
        """Return True if the row has cells and all of them are delimiters."""
        return bool(self.cells) and all(cell.is_delimiter() for cell in self.cells)

    def to_text(self) -> str:
        return (
            self.margin_left
            + "|"
            + "|".join(cell.to_text() for cell in self.cells)
            + "|"
            + self.margin_right
        )


@dataclass(frozen=True, slots=True)
class Table:
    """A pipe table as read from (or written to) consecutive buffer lines.

    Attributes:
        rows: Rows in order, one per line

    Examples:
        >>> from mesita.parser import read_table
        >>> table = read_table(["| a | b |", "| --- | --- |"])
        >>> table.height, table.width
        (2, 2)

    """

    rows: tuple[TableRow, ...]

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        """Maximum number of cells of any row."""
        return max((row.width for row in self.rows), default=0)

    @property
    def header_width(self) -> int:
        """Number of cells of the header row."""
        return self.rows[0].width if self.rows else 0

    @property
    def alignment_row(self) -> TableRow | None:
        """Row 1 if it is a delimiter row, else None."""
        if len(self.rows) < 2:
            return None
        row = self.rows[1]
        return row if row.is_delimiter_row() else None

    def row_at(self, index: int) -> TableRow | None:
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return None

    def cell_at(self, row: int, column: int) -> TableCell | None:
        table_row = self.row_at(row)
        if table_row is None:
            return None
        return table_row.cell_at(column)

    def with_rows(self, rows: tuple[TableRow, ...]) -> Table:
        return replace(self, rows=rows)

    def to_lines(self) -> list[str]:
        return [row.to_text() for row in self.rows]

    def to_text(self) -> str:
        return "\n".join(self.to_lines())

    # -------------------------------------------------------------------------
    # Focus addressing
    # -------------------------------------------------------------------------

    def contains_row(self, pos: Point, start_row: int) -> bool:
        """Return True if the buffer position lies on one of the table's lines."""
        return 0 <= pos.row - start_row < len(self.rows)

    def focus_of_position(self, pos: Point, start_row: int) -> Focus:
        """Compute the focus for a buffer position.

        Args:
            pos: Buffer position
            start_row: Buffer row of the table's first line

        Returns:
            Focus of the position; ``Focus(0, 0, 0)`` when the position is
            outside of the table.
        """
        focus_row = pos.row - start_row
        row = self.row_at(focus_row)
        if row is None:
            return Focus(0, 0, 0)
        boundary = len(row.margin_left) + 1
        if boundary > pos.column:
            return Focus(focus_row, -1, pos.column)
        offset = pos.column - boundary
        column = 0
        for cell in row.cells:
            boundary += len(cell.raw) + 1
            if boundary > pos.column:
                break
            offset -= len(cell.raw) + 1
            column += 1
        return Focus(focus_row, column, offset)

    def position_of_focus(self, focus: Focus, start_row: int) -> Point | None:
        """Compute the buffer position addressed by a focus.

        Returns:
            The position, or None if the focused row does not exist.
        """
        row = self.row_at(focus.row)
        if row is None:
            return None
        if focus.column < 0:
            return Point(start_row + focus.row, focus.offset)
        column = len(row.margin_left) + 1
        for cell in row.cells[: focus.column]:
            column += len(cell.raw) + 1
        return Point(start_row + focus.row, column + focus.offset)

    def selection_range_of_focus(self, focus: Focus, start_row: int) -> Range | None:
        """Compute the buffer range of the focused cell's content.

        Returns:
            The range, or None if the focus addresses a margin, a missing
            row, or an empty cell.
        """
        row = self.row_at(focus.row)
        if row is None:
            return None
        cell = row.cell_at(focus.column)
        if cell is None or cell.content == "":
            return None
        column = len(row.margin_left) + 1
        for preceding in row.cells[: focus.column]:
            column += len(preceding.raw) + 1
        column += cell.padding_left
        buffer_row = start_row + focus.row
        return Range(
            Point(buffer_row, column),
            Point(buffer_row, column + len(cell.content)),
        )


__all__ = ["Table", "TableCell", "TableRow"]
