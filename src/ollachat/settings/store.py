"""User settings persisted to a key/value store.

Two independent flags, read once at startup and written through on
every change.
"""

import json
import logging

from .base import KeyValueStore

logger = logging.getLogger(__name__)

THINKING_MODE_KEY = "thinkingMode"
STREAMING_MODE_KEY = "streamingMode"


class Settings:
    """Thinking and streaming flags backed by durable storage.

    Example:
        settings = Settings(create_settings_store("file"))
        settings.thinking_mode = True   # persisted immediately
    """

    DEFAULT_THINKING_MODE = False
    DEFAULT_STREAMING_MODE = True

    def __init__(self, store: KeyValueStore):
        self._store = store
        self._thinking_mode = self._read(THINKING_MODE_KEY, self.DEFAULT_THINKING_MODE)
        self._streaming_mode = self._read(STREAMING_MODE_KEY, self.DEFAULT_STREAMING_MODE)

    def _read(self, key: str, default: bool) -> bool:
        raw = self._store.get_item(key)
        if raw is None:
            return default
        try:
            return bool(json.loads(raw))
        except json.JSONDecodeError:
            logger.debug("Ignoring undecodable value for %s: %r", key, raw)
            return default

    def _write(self, key: str, value: bool) -> None:
        self._store.set_item(key, json.dumps(value))

    @property
    def thinking_mode(self) -> bool:
        """Request and display the model's reasoning trace."""
        return self._thinking_mode

    @thinking_mode.setter
    def thinking_mode(self, value: bool) -> None:
        self._thinking_mode = bool(value)
        self._write(THINKING_MODE_KEY, self._thinking_mode)

    @property
    def streaming_mode(self) -> bool:
        """Receive responses incrementally instead of in one payload."""
        return self._streaming_mode

    @streaming_mode.setter
    def streaming_mode(self, value: bool) -> None:
        self._streaming_mode = bool(value)
        self._write(STREAMING_MODE_KEY, self._streaming_mode)

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def as_dict(self) -> dict[str, bool]:
        return {
            THINKING_MODE_KEY: self._thinking_mode,
            STREAMING_MODE_KEY: self._streaming_mode,
        }
