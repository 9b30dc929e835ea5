"""Immutable table options for mesita.

Every command receives its options explicitly; nothing is read from ambient
state. A single TableOptions instance can be built once from the host
editor's settings and reused across commands.

Usage:
    from mesita import TableEditor, TableOptions

    options = TableOptions(min_delimiter_width=5, smart_cursor=True)
    editor = TableEditor(buffer)
    editor.next_cell(options)

    # Or from a settings mapping (unknown keys are ignored)
    options = TableOptions.from_dict({"default_alignment": "center"})

"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

from mesita.errors import OptionsError


class Alignment(Enum):
    """Column alignment encoded by a delimiter cell."""

    DEFAULT = "default"
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


class HeaderAlignment(Enum):
    """Alignment of the header row.

    FOLLOW aligns each header cell like the rest of its column.
    """

    FOLLOW = "follow"
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


class FormatType(Enum):
    """How far a table is reformatted.

    NORMAL pads every column to a common width; WEAK only normalizes the
    spacing around cell contents.
    """

    NORMAL = "normal"
    WEAK = "weak"


@dataclass(frozen=True, slots=True)
class TableOptions:
    """Immutable table options.

    Attributes:
        left_margin_chars: Extra characters allowed before the first pipe
            of a row (e.g. ">" for tables inside block quotes)
        format_type: NORMAL or WEAK formatting
        min_delimiter_width: Minimum number of dashes in a delimiter cell,
            and the minimum content width of every column
        default_alignment: How DEFAULT columns are rendered (never DEFAULT)
        header_alignment: Alignment of the header row
        normalize: NFC-normalize text before measuring its width
        wide_chars: Characters always measured as two columns
        narrow_chars: Characters always measured as one column
        ambiguous_as_wide: Measure East Asian Ambiguous characters as wide
        smart_cursor: Remember the starting column across next-cell and
            next-row sequences

    """

    left_margin_chars: frozenset[str] = frozenset()
    format_type: FormatType = FormatType.NORMAL
    min_delimiter_width: int = 3
    default_alignment: Alignment = Alignment.LEFT
    header_alignment: HeaderAlignment = HeaderAlignment.FOLLOW
    normalize: bool = True
    wide_chars: frozenset[str] = frozenset()
    narrow_chars: frozenset[str] = frozenset()
    ambiguous_as_wide: bool = False
    smart_cursor: bool = False

    def __post_init__(self) -> None:
        if self.default_alignment is Alignment.DEFAULT:
            raise OptionsError(
                "default_alignment", self.default_alignment, "must be left, right or center"
            )
        if self.min_delimiter_width < 1:
            raise OptionsError(
                "min_delimiter_width", self.min_delimiter_width, "must be at least 1"
            )

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> TableOptions:
        """Create TableOptions from a settings mapping.

        Only includes keys that are valid TableOptions fields; unknown keys
        are silently ignored. Enum fields accept their string values and
        character-set fields accept any iterable of characters (a string
        counts as the set of its characters).

        Args:
            config_dict: Mapping of option names to values.

        Returns:
            New TableOptions instance.

        Raises:
            OptionsError: A known key carries an unusable value.

        Example:
            >>> options = TableOptions.from_dict({
            ...     "default_alignment": "center",
            ...     "wide_chars": "Ω",
            ...     "unknown_key": "ignored",
            ... })
            >>> options.default_alignment
            <Alignment.CENTER: 'center'>

        """
        values = dict(config_dict)
        # Older settings name the column minimum after the content
        if "min_content_width" in values and "min_delimiter_width" not in values:
            values["min_delimiter_width"] = values["min_content_width"]

        converters = {
            "left_margin_chars": _char_set,
            "wide_chars": _char_set,
            "narrow_chars": _char_set,
            "format_type": FormatType,
            "default_alignment": Alignment,
            "header_alignment": HeaderAlignment,
            "min_delimiter_width": int,
        }
        valid_fields = {f.name for f in fields(cls)}
        filtered: dict[str, Any] = {}
        for key, value in values.items():
            if key not in valid_fields:
                continue
            convert = converters.get(key)
            if convert is not None:
                try:
                    value = convert(value)
                except (TypeError, ValueError) as e:
                    raise OptionsError(key, value, str(e)) from e
            filtered[key] = value
        return cls(**filtered)


def _char_set(value: Iterable[str]) -> frozenset[str]:
    chars = frozenset(value)
    for char in chars:
        if not isinstance(char, str) or len(char) != 1:
            raise ValueError("expected single characters")
    return chars


# Module-level default options (reused, never recreated)
DEFAULT_OPTIONS: TableOptions = TableOptions()


__all__ = [
    "Alignment",
    "DEFAULT_OPTIONS",
    "FormatType",
    "HeaderAlignment",
    "TableOptions",
]
