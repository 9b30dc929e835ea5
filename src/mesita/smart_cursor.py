"""Smart cursor memory.

With the smart cursor enabled, a run of next-cell and next-row commands
remembers the column the run started from, so that

    | a | b | c |          Tab, Tab, Enter starting in column "b"
    | d | e | f |   ->     lands in column "b" of the next row

The memory belongs to one TableEditor and is a small state machine:

    Inactive --activate--> Active(column, table_start, last_focus)
    Active   --advance---> Active(column, table_start, new last_focus)
    Active   --reset-----> Inactive

next_cell and next_row activate it with the column they start from,
before moving, and then advance its anchor; every other command
resets it, as does any invocation that does not start exactly where the
previous one left off (different table start, or a focus other than the
one the engine last placed).

Thread Safety:
Not thread-safe; owned by a single TableEditor driven from the editor's
event loop.

"""

from __future__ import annotations

from dataclasses import dataclass

from mesita.location import Focus, Point


@dataclass(frozen=True, slots=True)
class Inactive:
    """No column is remembered."""


@dataclass(frozen=True, slots=True)
class Active:
    """A column is remembered.

    Attributes:
        column: Column to return to on row transitions
        table_start: Buffer position of the first line of the table
        last_focus: Focus (row, column) the engine placed last

    """

    column: int
    table_start: Point
    last_focus: tuple[int, int]


SmartCursorState = Inactive | Active

INACTIVE = Inactive()


class SmartCursor:
    """Holder for the smart cursor state of one editor."""

    __slots__ = ("_state",)

    def __init__(self) -> None:
        self._state: SmartCursorState = INACTIVE

    @property
    def state(self) -> SmartCursorState:
        return self._state

    @property
    def is_active(self) -> bool:
        return isinstance(self._state, Active)

    def reset(self) -> None:
        self._state = INACTIVE

    def continues(self, table_start: Point, focus: Focus) -> bool:
        """Return True if an invocation picks up where the last one ended."""
        match self._state:
            case Active(table_start=start, last_focus=last):
                return start == table_start and last == focus.pos
            case _:
                return False

    def remembered_column(self) -> int | None:
        match self._state:
            case Active(column=column):
                return column
            case _:
                return None

    def activate(self, column: int, table_start: Point, focus: Focus) -> bool:
        """Start a sequence remembering ``column``, unless one is running.

        Returns:
            True if the state changed from Inactive to Active
        """
        if self.is_active:
            return False
        self._state = Active(column, table_start, focus.pos)
        return True

    def advance(self, table_start: Point, focus: Focus) -> None:
        """Move the anchor of a running sequence, keeping its column."""
        match self._state:
            case Active(column=column):
                self._state = Active(column, table_start, focus.pos)
            case _:
                pass


__all__ = ["Active", "Inactive", "SmartCursor", "SmartCursorState"]
