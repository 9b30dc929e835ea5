"""Exception classes for mesita.

The table engine itself never raises for the ordinary failure kinds of an
editing session (no table at the cursor, a focus that no longer exists,
content wider than its column): commands degrade to no-ops and lookups
return None. Exceptions are reserved for misuse of the library surface.
"""

from __future__ import annotations


class MesitaError(Exception):
    """Base exception for all mesita errors.

    Subclass this for specific error categories.
    """

    pass


class OptionsError(MesitaError):
    """Invalid table option value.

    Raised by TableOptions.from_dict when a known key carries a value
    that cannot be converted.
    """

    def __init__(self, key: str, value: object, message: str) -> None:
        """Initialize options error.

        Args:
            key: Option name (e.g., "default_alignment")
            value: The rejected value
            message: Description of the problem
        """
        self.key = key
        self.value = value
        super().__init__(f"Option '{key}' = {value!r}: {message}")


class BufferRangeError(MesitaError, IndexError):
    """Row outside of an in-memory line buffer."""

    def __init__(self, row: int, last_row: int) -> None:
        self.row = row
        self.last_row = last_row
        super().__init__(f"row {row} is out of range (last row is {last_row})")
