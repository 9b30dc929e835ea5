"""Pipe-table row parsing for mesita.

Splits a line into cells on unescaped, unquoted pipes:

    | foo `a|b` | bar \\| baz |
    ^         ^             ^
    boundaries (the pipes inside the code span and after the
    backslash are cell content)

Malformed input never fails: an unmatched backtick run is literal text,
and a trailing backslash is kept as is.

Thread Safety:
All functions are pure.

"""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache

from mesita.config import DEFAULT_OPTIONS, TableOptions
from mesita.table import Table, TableCell, TableRow


def split_cells(text: str) -> list[str]:
    """Split a line on cell boundaries.

    Code spans follow the Markdown rule: a run of N backticks opens a span
    that only a run of exactly N backticks closes. A backslash takes the
    following character with it, so ``\\|`` never splits.

    Args:
        text: A single line

    Returns:
        Raw segments, including the (possibly empty) text before the first
        and after the last pipe
    """
    cells: list[str] = []
    buf: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        char = text[i]
        if char == "`":
            start = i
            while i < n and text[i] == "`":
                i += 1
            run = i - start
            close = _find_closing_backticks(text, i, run)
            if close == -1:
                # Unmatched: the opening run is literal text
                buf.append(text[start:i])
            else:
                buf.append(text[start : close + run])
                i = close + run
        elif char == "\\":
            buf.append(text[i : i + 2])
            i += 2
        elif char == "|":
            cells.append("".join(buf))
            buf = []
            i += 1
        else:
            buf.append(char)
            i += 1
    cells.append("".join(buf))
    return cells


def _find_closing_backticks(text: str, pos: int, run: int) -> int:
    """Return the index of a backtick run of exactly ``run`` length, or -1."""
    n = len(text)
    i = pos
    while i < n:
        if text[i] == "`":
            start = i
            while i < n and text[i] == "`":
                i += 1
            if i - start == run:
                return start
        else:
            i += 1
    return -1


def read_table_row(text: str, options: TableOptions = DEFAULT_OPTIONS) -> TableRow:
    """Read a table row from a line.

    A segment before the first pipe made only of whitespace (and
    ``options.left_margin_chars``) becomes the left margin, and a
    whitespace-only segment after the last pipe becomes the right margin;
    anything else stays a cell.

    Example:
        >>> row = read_table_row(" | foo | bar | ")
        >>> [c.raw for c in row.cells], row.margin_left, row.margin_right
        ([' foo ', ' bar '], ' ', ' ')
    """
    segments = split_cells(text)
    margin_left = ""
    if segments and _margin_regex(options.left_margin_chars).match(segments[0]):
        margin_left = segments.pop(0)
    margin_right = ""
    if segments and segments[-1].strip() == "":
        margin_right = segments.pop()
    return TableRow(
        cells=tuple(TableCell(raw) for raw in segments),
        margin_left=margin_left,
        margin_right=margin_right,
    )


def read_table(lines: Iterable[str], options: TableOptions = DEFAULT_OPTIONS) -> Table:
    """Read a table, one row per line."""
    return Table(rows=tuple(read_table_row(line, options) for line in lines))


@lru_cache(maxsize=32)
def _margin_regex(left_margin_chars: frozenset[str]) -> re.Pattern[str]:
    chars = "".join(re.escape(char) for char in sorted(left_margin_chars))
    return re.compile(rf"^[\s{chars}]*$")


@lru_cache(maxsize=32)
def _table_row_regex(left_margin_chars: frozenset[str]) -> re.Pattern[str]:
    chars = "".join(re.escape(char) for char in sorted(left_margin_chars))
    return re.compile(rf"^[\s{chars}]*\|")


def is_table_row(line: str, options: TableOptions = DEFAULT_OPTIONS) -> bool:
    """Return True if the line starts with a pipe after its left margin.

    The left margin is whitespace plus any of ``options.left_margin_chars``.
    """
    return _table_row_regex(options.left_margin_chars).match(line) is not None


def read_row_if_table(line: str, options: TableOptions = DEFAULT_OPTIONS) -> TableRow | None:
    """Read a row, or return None if the line is not a table row."""
    if not is_table_row(line, options):
        return None
    return read_table_row(line, options)


__all__ = [
    "is_table_row",
    "read_row_if_table",
    "read_table",
    "read_table_row",
    "split_cells",
]
