"""Loggers for the mesita namespace.

Every mesita module logs under ``mesita.``; the library installs no
handlers, so records reach whatever the host editor configures.

Example:
    >>> from mesita.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Table at line %d reformatted", 12)
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a mesita component.

    Names outside the package are nested under ``mesita.`` so that one
    ``logging.getLogger("mesita")`` call controls every command's output.

    Args:
        name: Module or component name (typically __name__)

    Example:
        >>> get_logger("commands").name
        'mesita.commands'
        >>> get_logger("mesita.formatter").name
        'mesita.formatter'
    """
    if not (name == "mesita" or name.startswith("mesita.")):
        name = f"mesita.{name}"
    return logging.getLogger(name)
