"""Table formatting.

Renders a completed table in canonical form:

    | Name | Qty |          | Name  | Qty |
    |:--|--:|        ->     |:----- | ---:|
    | apple | 3 |           | apple |   3 |

Every row shares the header's left margin and loses its right margin.
Column widths are display widths (see mesita.width) and only ever grow to
fit content; content wider than a column is emitted unpadded.

Thread Safety:
Pure functions on immutable tables.

"""

from __future__ import annotations

from dataclasses import dataclass

from mesita.config import Alignment, FormatType, HeaderAlignment, TableOptions
from mesita.table import Table, TableCell, TableRow
from mesita.width import pad_text, text_width


@dataclass(frozen=True, slots=True)
class FormattedTable:
    """Result of format_table.

    Attributes:
        table: The formatted table
        margin_left: Left margin shared by all rows

    """

    table: Table
    margin_left: str


def delimiter_text(alignment: Alignment, width: int) -> str:
    """Canonical raw text of a delimiter cell.

    Example:
        >>> delimiter_text(Alignment.RIGHT, 4)
        ' ----:'
    """
    bar = "-" * width
    match alignment:
        case Alignment.LEFT:
            return ":" + bar + " "
        case Alignment.RIGHT:
            return " " + bar + ":"
        case Alignment.CENTER:
            return ":" + bar + ":"
        case _:
            return " " + bar + " "


def _column_alignments(table: Table) -> list[Alignment]:
    alignment_row = table.alignment_row
    alignments: list[Alignment] = []
    for j in range(table.width):
        cell = alignment_row.cell_at(j) if alignment_row is not None else None
        alignments.append(cell.alignment if cell is not None else Alignment.DEFAULT)
    return alignments


def _resolve_alignment(
    alignment: Alignment, is_header: bool, options: TableOptions
) -> Alignment:
    if is_header and options.header_alignment is not HeaderAlignment.FOLLOW:
        return Alignment(options.header_alignment.value)
    if alignment is Alignment.DEFAULT:
        return options.default_alignment
    return alignment


def _format_normal(table: Table, options: TableOptions) -> FormattedTable:
    margin_left = table.rows[0].margin_left
    has_alignment_row = table.alignment_row is not None
    alignments = _column_alignments(table)

    widths = [options.min_delimiter_width] * table.width
    for i, row in enumerate(table.rows):
        if i == 1 and has_alignment_row:
            continue
        for j, cell in enumerate(row.cells):
            widths[j] = max(widths[j], text_width(cell.content, options))

    rows: list[TableRow] = []
    for i, row in enumerate(table.rows):
        if i == 1 and has_alignment_row:
            cells = tuple(
                TableCell(delimiter_text(alignments[j], widths[j])) for j in range(row.width)
            )
        else:
            cells = tuple(
                TableCell(
                    " "
                    + pad_text(
                        cell.content,
                        widths[j],
                        _resolve_alignment(alignments[j], i == 0, options),
                        options,
                    )
                    + " "
                )
                for j, cell in enumerate(row.cells)
            )
        rows.append(TableRow(cells=cells, margin_left=margin_left, margin_right=""))
    return FormattedTable(table=Table(rows=tuple(rows)), margin_left=margin_left)


def _format_weak(table: Table, options: TableOptions) -> FormattedTable:
    margin_left = table.rows[0].margin_left
    has_alignment_row = table.alignment_row is not None

    rows: list[TableRow] = []
    for i, row in enumerate(table.rows):
        if i == 1 and has_alignment_row:
            cells = tuple(
                TableCell(delimiter_text(cell.alignment, options.min_delimiter_width))
                for cell in row.cells
            )
        else:
            cells = tuple(TableCell(" " + cell.content + " ") for cell in row.cells)
        rows.append(TableRow(cells=cells, margin_left=margin_left, margin_right=""))
    return FormattedTable(table=Table(rows=tuple(rows)), margin_left=margin_left)


def format_table(table: Table, options: TableOptions) -> FormattedTable:
    """Format a table.

    Tables without rows or columns come back as rows of no cells with
    empty margins.

    Args:
        table: Table to format, normally completed first
        options: Formatting and width options

    Returns:
        FormattedTable with the new table and the shared left margin
    """
    if table.height == 0:
        return FormattedTable(table=Table(rows=()), margin_left="")
    if table.width == 0:
        return FormattedTable(
            table=Table(rows=tuple(TableRow(cells=()) for _ in table.rows)),
            margin_left="",
        )
    if options.format_type is FormatType.WEAK:
        return _format_weak(table, options)
    return _format_normal(table, options)


def alter_alignment(
    table: Table, column: int, alignment: Alignment, options: TableOptions
) -> Table:
    """Rewrite the alignment of one column.

    Returns the table unchanged when it has no alignment row or the
    column does not exist in it.
    """
    alignment_row = table.alignment_row
    if alignment_row is None or alignment_row.cell_at(column) is None:
        return table
    cells = list(alignment_row.cells)
    cells[column] = TableCell(delimiter_text(alignment, options.min_delimiter_width))
    rows = list(table.rows)
    rows[1] = alignment_row.with_cells(tuple(cells))
    return table.with_rows(tuple(rows))


__all__ = ["FormattedTable", "alter_alignment", "delimiter_text", "format_table"]
