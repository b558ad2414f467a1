"""UI configuration constants.

Centralizes display strings, limits and theme names for the UI module.
"""

import logging


class LogLevel:
    """Log panel thresholds.

    These are the standard library levels, so a record's `levelno` can be
    compared against them directly. CRITICAL is displayed as ERROR.
    """

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR

    _labels = {DEBUG: "DEBUG", INFO: "INFO", WARNING: "WARN", ERROR: "ERROR"}

    @classmethod
    def name(cls, level: int) -> str:
        """Short label for the panel, at most five characters."""
        return cls._labels.get(min(level, cls.ERROR), "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Parse a --log-level value. Unknown names fall back to DEBUG."""
        level = logging.getLevelName(level_str.strip().upper())
        if isinstance(level, int) and level in cls._labels:
            return level
        return cls.DEBUG


# Log panel
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # characters

# Chat view
MESSAGE_TIMESTAMP_FORMAT = "%H:%M:%S"
THINKING_TITLE_ACTIVE = "Thinking..."
THINKING_TITLE_DONE = "Thought process"
TYPING_INDICATOR = "Assistant is typing..."
NOTIFY_TIMEOUT = 4  # seconds

# Input bar
INPUT_HISTORY_MAX_SIZE = 100

# Registered in OllamaChatApp.on_mount
THEME_DARK = "ollachat-dark"
THEME_LIGHT = "ollachat-light"
