"""Buffer coordinates and table-relative focus.

Provides Point and Range for positions in the host text buffer, and Focus
for the logical address of the cursor inside a table.

All coordinates are 0-indexed.

Thread Safety:
All types are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Point:
    """A position in the text buffer.

    Attributes:
        row: Line index (0-indexed)
        column: Character index within the line (0-indexed)

    Examples:
        >>> Point(1, 4)
        Point(row=1, column=4)
    """

    row: int
    column: int

    def __str__(self) -> str:
        return f"{self.row}:{self.column}"


@dataclass(frozen=True, slots=True)
class Range:
    """A span of the text buffer, ``start`` inclusive, ``end`` exclusive."""

    start: Point
    end: Point


@dataclass(frozen=True, slots=True)
class Focus:
    """Table-relative address of the cursor.

    Column -1 is the left margin of the row; a column equal to or greater
    than the number of cells in the row addresses the right margin.

    Attributes:
        row: Row index within the table
        column: Column index within the row
        offset: Raw character offset within the addressed cell or margin

    """

    row: int
    column: int
    offset: int = 0

    @property
    def pos(self) -> tuple[int, int]:
        """(row, column) pair, ignoring the offset."""
        return (self.row, self.column)

    def pos_equals(self, other: Focus) -> bool:
        """Return True if both foci address the same cell."""
        return self.row == other.row and self.column == other.column

    def with_row(self, row: int) -> Focus:
        return replace(self, row=row)

    def with_column(self, column: int) -> Focus:
        return replace(self, column=column)

    def with_offset(self, offset: int) -> Focus:
        return replace(self, offset=offset)
