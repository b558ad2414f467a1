"""Settings module for ollachat.

Provides the persisted thinking/streaming flags and their storage backends.
"""

from .base import KeyValueStore
from .factory import create_settings_store
from .store import STREAMING_MODE_KEY, THINKING_MODE_KEY, Settings

__all__ = [
    "KeyValueStore",
    "STREAMING_MODE_KEY",
    "Settings",
    "THINKING_MODE_KEY",
    "create_settings_store",
]
