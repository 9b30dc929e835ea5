"""Text editor interface for mesita.

TableEditor never touches a host editor directly; it talks to an object
implementing the TextEditor protocol. Hosts adapt their buffer and cursor
APIs to it, and LineBuffer provides a complete in-memory implementation
for headless use and tests.

Coordinates are 0-indexed (row, column) Points. Lines never include their
line ending.

Example:
    >>> from mesita import TableEditor, TableOptions
    >>> buffer = LineBuffer("| a | b |\\n|---|---|", cursor=Point(0, 2))
    >>> TableEditor(buffer).format(TableOptions())
    >>> buffer.text
    '| a   | b   |\\n| --- | --- |'

"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol

from mesita.errors import BufferRangeError
from mesita.location import Point, Range


class TextEditor(Protocol):
    """Protocol for the host editor seen by TableEditor."""

    def get_cursor_position(self) -> Point:
        """Return the position of the (primary) cursor."""
        ...

    def set_cursor_position(self, pos: Point) -> None:
        """Move the cursor, clearing any selection."""
        ...

    def set_selection_range(self, range: Range) -> None:
        """Select a range of text."""
        ...

    def get_last_row(self) -> int:
        """Return the index of the last line."""
        ...

    def accepts_table_edit(self, row: int) -> bool:
        """Return True if table editing is allowed on the line.

        Hosts use this for grammar or scope checks (e.g. not inside a
        fenced code block).
        """
        ...

    def get_line(self, row: int) -> str:
        """Return the line at ``row`` without its line ending."""
        ...

    def insert_line(self, row: int, line: str) -> None:
        """Insert a line before ``row``; past the last line, append it."""
        ...

    def delete_line(self, row: int) -> None:
        """Delete the line at ``row``."""
        ...

    def replace_lines(self, start_row: int, end_row: int, lines: list[str]) -> None:
        """Replace lines ``start_row`` (inclusive) to ``end_row`` (exclusive)."""
        ...

    def transact(self) -> AbstractContextManager[None]:
        """Group every edit made inside the block into one undo step."""
        ...


class LineBuffer:
    """In-memory TextEditor.

    Holds a list of lines, a cursor and an optional selection. Edits made
    inside ``transact()`` (which may nest) form a single undo step; edits
    outside of a transaction are one step each.

    Args:
        text: Initial text, either a string (split on newlines) or lines
        cursor: Initial cursor position
        accepts_table_edit: Predicate for accepts_table_edit; all rows are
            accepted when omitted

    """

    __slots__ = (
        "_accepts",
        "_cursor",
        "_depth",
        "_lines",
        "_pending",
        "_selection",
        "_undo_stack",
    )

    def __init__(
        self,
        text: str | Iterable[str] = "",
        *,
        cursor: Point = Point(0, 0),
        accepts_table_edit: Callable[[int], bool] | None = None,
    ) -> None:
        self._lines: list[str] = text.split("\n") if isinstance(text, str) else list(text)
        if not self._lines:
            self._lines = [""]
        self._cursor = self._clip(cursor)
        self._selection: Range | None = None
        self._accepts = accepts_table_edit
        self._depth = 0
        self._pending: list[str] | None = None
        self._undo_stack: list[list[str]] = []

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def selection(self) -> Range | None:
        """Current selection, or None if only the cursor is placed."""
        return self._selection

    @property
    def undo_depth(self) -> int:
        """Number of undo steps recorded so far."""
        return len(self._undo_stack)

    def undo(self) -> bool:
        """Revert the last undo step. Returns False if there is none."""
        if not self._undo_stack:
            return False
        self._lines = self._undo_stack.pop()
        self._cursor = self._clip(self._cursor)
        self._selection = None
        return True

    # -------------------------------------------------------------------------
    # TextEditor protocol
    # -------------------------------------------------------------------------

    def get_cursor_position(self) -> Point:
        return self._cursor

    def set_cursor_position(self, pos: Point) -> None:
        self._cursor = self._clip(pos)
        self._selection = None

    def set_selection_range(self, range: Range) -> None:
        self._selection = Range(self._clip(range.start), self._clip(range.end))
        self._cursor = self._selection.end

    def get_last_row(self) -> int:
        return len(self._lines) - 1

    def accepts_table_edit(self, row: int) -> bool:
        if self._accepts is None:
            return True
        return self._accepts(row)

    def get_line(self, row: int) -> str:
        self._check_row(row)
        return self._lines[row]

    def insert_line(self, row: int, line: str) -> None:
        if row < 0:
            raise BufferRangeError(row, self.get_last_row())
        self._record()
        if row > len(self._lines):
            row = len(self._lines)
        self._lines.insert(row, line)

    def delete_line(self, row: int) -> None:
        self._check_row(row)
        self._record()
        del self._lines[row]
        if not self._lines:
            self._lines = [""]

    def replace_lines(self, start_row: int, end_row: int, lines: list[str]) -> None:
        if not 0 <= start_row <= end_row <= len(self._lines):
            raise BufferRangeError(end_row if start_row >= 0 else start_row, self.get_last_row())
        self._record()
        self._lines[start_row:end_row] = lines
        if not self._lines:
            self._lines = [""]

    @contextmanager
    def transact(self) -> Iterator[None]:
        if self._depth == 0:
            self._pending = list(self._lines)
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
            if self._depth == 0:
                snapshot = self._pending
                self._pending = None
                if snapshot is not None and snapshot != self._lines:
                    self._undo_stack.append(snapshot)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _record(self) -> None:
        if self._depth == 0:
            self._undo_stack.append(list(self._lines))

    def _check_row(self, row: int) -> None:
        if not 0 <= row < len(self._lines):
            raise BufferRangeError(row, self.get_last_row())

    def _clip(self, pos: Point) -> Point:
        row = min(max(pos.row, 0), len(self._lines) - 1)
        column = min(max(pos.column, 0), len(self._lines[row]))
        return Point(row, column)


__all__ = ["LineBuffer", "TextEditor"]
