"""Utility modules for mesita.

Provides:
- logger: get_logger, loggers nested under the mesita namespace
"""

from mesita.utils.logger import get_logger

__all__ = [
    "get_logger",
]
