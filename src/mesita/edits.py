"""Structural table edits.

Each function returns a new Table built from the old one plus one delta
(insert, delete or move at an index); the input table is never modified.
Indices are not validated beyond what slicing does: callers decide which
rows and columns an editing command may touch.

Thread Safety:
Pure functions on immutable tables.

"""

from __future__ import annotations

from collections.abc import Sequence

from mesita.config import Alignment, TableOptions
from mesita.formatter import delimiter_text
from mesita.table import Table, TableCell, TableRow


def empty_row(width: int) -> TableRow:
    """A row of ``width`` empty cells without margins."""
    return TableRow(cells=tuple(TableCell("") for _ in range(width)))


def insert_row(table: Table, index: int, row: TableRow) -> Table:
    rows = table.rows
    return table.with_rows(rows[:index] + (row,) + rows[index:])


def delete_row(table: Table, index: int) -> Table:
    rows = table.rows
    return table.with_rows(rows[:index] + rows[index + 1 :])


def move_row(table: Table, index: int, dest: int) -> Table:
    """Move the row at ``index`` so that it ends up at ``dest``."""
    rows = list(table.rows)
    row = rows.pop(index)
    rows.insert(dest, row)
    return table.with_rows(tuple(rows))


def clear_row(table: Table, index: int) -> Table:
    """Replace every cell of a row with an empty cell, keeping its margins."""
    rows = list(table.rows)
    rows[index] = rows[index].with_cells(tuple(TableCell("") for _ in rows[index].cells))
    return table.with_rows(tuple(rows))


def insert_column(
    table: Table, index: int, cells: Sequence[TableCell], options: TableOptions
) -> Table:
    """Insert a column.

    Args:
        table: Completed table
        index: Column index of the new column
        cells: New cells for every row except the alignment row, in row order
        options: Uses ``min_delimiter_width`` for the new delimiter cell

    Returns:
        New table
    """
    has_alignment_row = table.alignment_row is not None
    new_cells = iter(cells)
    rows: list[TableRow] = []
    for i, row in enumerate(table.rows):
        if i == 1 and has_alignment_row:
            cell = TableCell(delimiter_text(Alignment.DEFAULT, options.min_delimiter_width))
        else:
            cell = next(new_cells)
        rows.append(row.with_cells(row.cells[:index] + (cell,) + row.cells[index:]))
    return table.with_rows(tuple(rows))


def delete_column(table: Table, index: int) -> Table:
    return table.with_rows(
        tuple(row.with_cells(row.cells[:index] + row.cells[index + 1 :]) for row in table.rows)
    )


def move_column(table: Table, index: int, dest: int) -> Table:
    """Move the column at ``index`` so that it ends up at ``dest``.

    Rows too short to hold both indices are left as they are.
    """
    rows: list[TableRow] = []
    for row in table.rows:
        if max(index, dest) >= row.width:
            rows.append(row)
            continue
        cells = list(row.cells)
        cell = cells.pop(index)
        cells.insert(dest, cell)
        rows.append(row.with_cells(tuple(cells)))
    return table.with_rows(tuple(rows))


def single_empty_column(table: Table, options: TableOptions) -> Table:
    """Replace every column with one empty column.

    The alignment row, if any, gets a default delimiter cell.
    """
    has_alignment_row = table.alignment_row is not None
    rows: list[TableRow] = []
    for i, row in enumerate(table.rows):
        if i == 1 and has_alignment_row:
            cell = TableCell(delimiter_text(Alignment.DEFAULT, options.min_delimiter_width))
        else:
            cell = TableCell("")
        rows.append(row.with_cells((cell,)))
    return table.with_rows(tuple(rows))


__all__ = [
    "clear_row",
    "delete_column",
    "delete_row",
    "empty_row",
    "insert_column",
    "insert_row",
    "move_column",
    "move_row",
    "single_empty_column",
]
