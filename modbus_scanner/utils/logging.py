"""Logging utilities for the scanner package.

Provides a centralized logging function with timestamp prefix and a
runtime-adjustable level.
"""

import sys
from datetime import datetime

LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}
VALID_LEVELS = tuple(LEVELS)

_current_level = "INFO"


def log(message: str, level: str = "INFO") -> None:
    """Print message with timestamp prefix.

    Messages below the current level are dropped.

    Args:
        message: The message to log.
        level: One of DEBUG, INFO, WARNING, ERROR (default: INFO).
    """
    if LEVELS.get(str(level).upper(), LEVELS["INFO"]) < LEVELS[_current_level]:
        return
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{timestamp}] {message}", file=sys.stdout, flush=True)


def set_logging_level(level: str) -> None:
    """Change the minimum level that ``log`` prints.

    Args:
        level: One of DEBUG, INFO, WARNING, ERROR.

    Raises:
        ValueError: If the level name is not recognised.
    """
    global _current_level
    name = str(level).upper()
    if name not in LEVELS:
        raise ValueError(f"Invalid logging level: {level}")
    _current_level = name


def get_current_logging_level() -> str:
    """Return the name of the current logging level."""
    return _current_level
