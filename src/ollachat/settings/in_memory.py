"""In-memory settings backend.

Simple dict-based storage. Data is lost when the application exits.
"""

from .base import KeyValueStore


class InMemoryStore(KeyValueStore):
    """In-memory key/value store (session-only).

    Suitable for tests and for running without touching the filesystem.
    """

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    @property
    def backend_type(self) -> str:
        return "memory"
