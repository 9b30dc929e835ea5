"""Display width of text for column alignment.

Cells are padded by display columns, not code points: East Asian wide and
fullwidth characters occupy two columns in a monospace editor. Ambiguous
characters (Greek, Cyrillic, some symbols) depend on the editor's font, so
their width is an option, and individual characters can be forced either
way.

Example:
    >>> from mesita.config import TableOptions
    >>> text_width("あa", TableOptions())
    3
    >>> pad_text("ab", 5, Alignment.CENTER, TableOptions())
    ' ab  '
"""

from __future__ import annotations

import unicodedata

from mesita.config import Alignment, TableOptions


def text_width(text: str, options: TableOptions) -> int:
    """Compute the display width of a string.

    Precedence per character: ``wide_chars`` (2), then ``narrow_chars``
    (1), then the Unicode East Asian Width property: F and W count 2,
    A counts 2 only when ``ambiguous_as_wide`` is set, everything else 1.

    Args:
        text: Text to measure
        options: Width policy

    Returns:
        Width in display columns
    """
    if options.normalize:
        text = unicodedata.normalize("NFC", text)
    width = 0
    for char in text:
        if char in options.wide_chars:
            width += 2
        elif char in options.narrow_chars:
            width += 1
        else:
            match unicodedata.east_asian_width(char):
                case "F" | "W":
                    width += 2
                case "A":
                    width += 2 if options.ambiguous_as_wide else 1
                case _:
                    width += 1
    return width


def pad_text(text: str, width: int, alignment: Alignment, options: TableOptions) -> str:
    """Pad text with spaces up to a display width.

    Text wider than ``width`` is returned as is; it is never truncated.

    Args:
        text: Text to pad
        width: Target display width
        alignment: LEFT, RIGHT or CENTER; DEFAULT pads like LEFT
        options: Width policy

    Returns:
        Padded text
    """
    space = width - text_width(text, options)
    if space < 0:
        return text
    match alignment:
        case Alignment.RIGHT:
            return " " * space + text
        case Alignment.CENTER:
            left = space // 2
            return " " * left + text + " " * (space - left)
        case _:
            return text + " " * space


__all__ = ["pad_text", "text_width"]
