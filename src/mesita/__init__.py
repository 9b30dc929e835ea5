"""
Mesita: Markdown pipe-table editing engine

Formats, navigates and restructures GitHub-style pipe tables inside a text
editor buffer. The host editor is reached through a small protocol, so the
same engine drives any editor, or the in-memory LineBuffer.

Quick Start:
    >>> from mesita import LineBuffer, Point, TableEditor, TableOptions
    >>> buffer = LineBuffer("| Name | Qty |\\n| apple | 3 |", cursor=Point(1, 3))
    >>> editor = TableEditor(buffer)
    >>> editor.format(TableOptions())
    >>> print(buffer.text)
    | Name  | Qty |
    | ----- | --- |
    | apple | 3   |

Pure table functions:
    >>> from mesita import complete_table, format_table, read_table
    >>> table = read_table(["| a | b |"])
    >>> completed = complete_table(table, TableOptions())
    >>> format_table(completed.table, TableOptions()).table.to_lines()
    ['| a   | b   |', '| --- | --- |']

Installation:
    pip install mesita               # Zero runtime dependencies
"""

from mesita.commands import TableEditor, TableInfo
from mesita.completion import CompletedTable, complete_table
from mesita.config import (
    DEFAULT_OPTIONS,
    Alignment,
    FormatType,
    HeaderAlignment,
    TableOptions,
)
from mesita.editor import LineBuffer, TextEditor
from mesita.edits import (
    clear_row,
    delete_column,
    delete_row,
    empty_row,
    insert_column,
    insert_row,
    move_column,
    move_row,
)
from mesita.errors import BufferRangeError, MesitaError, OptionsError
from mesita.formatter import FormattedTable, alter_alignment, delimiter_text, format_table
from mesita.location import Focus, Point, Range
from mesita.parser import is_table_row, read_row_if_table, read_table, read_table_row
from mesita.smart_cursor import SmartCursor
from mesita.table import Table, TableCell, TableRow
from mesita.width import pad_text, text_width

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_OPTIONS",
    "Alignment",
    "BufferRangeError",
    "CompletedTable",
    "Focus",
    "FormatType",
    "FormattedTable",
    "HeaderAlignment",
    "LineBuffer",
    "MesitaError",
    "OptionsError",
    "Point",
    "Range",
    "SmartCursor",
    "Table",
    "TableCell",
    "TableEditor",
    "TableInfo",
    "TableOptions",
    "TableRow",
    "TextEditor",
    "__version__",
    "alter_alignment",
    "clear_row",
    "complete_table",
    "delete_column",
    "delete_row",
    "delimiter_text",
    "empty_row",
    "format_table",
    "insert_column",
    "insert_row",
    "is_table_row",
    "move_column",
    "move_row",
    "pad_text",
    "read_row_if_table",
    "read_table",
    "read_table_row",
    "text_width",
]
