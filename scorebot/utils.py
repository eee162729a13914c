"""
Shared utilities for the Golf Scorebot.

This module provides common functions used across multiple modules
to avoid code duplication.
"""

import logging
import os
import re

from scorebot.config import LOG_LEVEL_ENV

# --- Shared Regex Patterns for Score Cells ---
# Whole number with optional sign, surrounding whitespace allowed: " 4", "+3", "-1"
INT_RE = re.compile(r"^\s*([+-]?[0-9]+)\s*$")


def parse_int(value) -> int | None:
    """
    Parse a spreadsheet cell as an integer stroke count.

    Args:
        value: Raw cell value (usually a string from the Sheets API)

    Returns:
        The integer value, or None if the cell is not a whole number
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None

    m = INT_RE.match(str(value))
    if not m:
        return None
    return int(m.group(1))


def cell_text(value) -> str:
    """Coerce a raw cell value to text, treating None as empty."""
    return "" if value is None else str(value)


# --- Logging Setup ---
def setup_logging(name: str | None = None, level: int | None = None) -> logging.Logger:
    """
    Configure and return a logger with consistent formatting.

    Args:
        name: Logger name (usually __name__ from the calling module)
        level: Logging level (default: LOG_LEVEL env var, else INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if level is None:
        level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
        level = getattr(logging, level_name, logging.INFO)

    logger.setLevel(level)
    return logger


__all__ = [
    # Logging
    'setup_logging',
    # Cell parsing
    'INT_RE',
    'parse_int',
    'cell_text',
]
