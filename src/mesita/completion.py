"""Table completion.

Turns a table as typed by the user into a rectangular table with an
alignment row:

    | A | B              | A | B |
    | C |        ->      | --- | --- |
                         | C |   |

Completion never moves existing text: padding cells are appended after the
last cell of a row, and the first padding cell inherits the row's right
margin so that a cursor sitting there keeps its offset.

Thread Safety:
Pure functions on immutable tables.

"""

from __future__ import annotations

from dataclasses import dataclass

from mesita.config import Alignment, TableOptions
from mesita.formatter import delimiter_text
from mesita.table import Table, TableCell, TableRow


@dataclass(frozen=True, slots=True)
class CompletedTable:
    """Result of complete_table.

    Attributes:
        table: The completed table
        delimiter_inserted: True if an alignment row was inserted at index 1,
            shifting every row below the header down by one

    """

    table: Table
    delimiter_inserted: bool


def _pad_row(row: TableRow, width: int) -> TableRow:
    missing = width - row.width
    if missing <= 0:
        return row
    padding = (TableCell(row.margin_right),) + tuple(TableCell("") for _ in range(missing - 1))
    return TableRow(
        cells=row.cells + padding,
        margin_left=row.margin_left,
        margin_right="",
    )


def _pad_delimiter_row(row: TableRow, width: int, options: TableOptions) -> TableRow:
    missing = width - row.width
    if missing <= 0:
        return row
    padding = tuple(
        TableCell(delimiter_text(Alignment.DEFAULT, options.min_delimiter_width))
        for _ in range(missing)
    )
    return TableRow(
        cells=row.cells + padding,
        margin_left=row.margin_left,
        margin_right="",
    )


def complete_table(table: Table, options: TableOptions) -> CompletedTable:
    """Complete a table.

    - A table without rows gets one empty row.
    - A table without columns gets one column per row, made from the
      row's right margin.
    - The header and body rows are padded with empty cells up to the
      table width.
    - A missing alignment row is inserted at index 1; an existing one is
      padded with default delimiter cells.

    Args:
        table: Table as read from the buffer
        options: Uses ``min_delimiter_width``

    Returns:
        CompletedTable with the new table and whether an alignment row
        was inserted
    """
    if table.height == 0:
        table = Table(rows=(TableRow(cells=()),))
    if table.width == 0:
        rows = tuple(
            TableRow(
                cells=(TableCell(row.margin_right),),
                margin_left=row.margin_left,
                margin_right="",
            )
            for row in table.rows
        )
        return complete_table(Table(rows=rows), options)

    width = table.width
    rows = table.rows
    alignment_row = table.alignment_row
    new_rows: list[TableRow] = [_pad_row(rows[0], width)]
    if alignment_row is not None:
        new_rows.append(_pad_delimiter_row(alignment_row, width, options))
        body = rows[2:]
    else:
        new_rows.append(
            TableRow(
                cells=tuple(
                    TableCell(delimiter_text(Alignment.DEFAULT, options.min_delimiter_width))
                    for _ in range(width)
                ),
            )
        )
        body = rows[1:]
    new_rows.extend(_pad_row(row, width) for row in body)
    return CompletedTable(
        table=Table(rows=tuple(new_rows)),
        delimiter_inserted=alignment_row is None,
    )


__all__ = ["CompletedTable", "complete_table"]
