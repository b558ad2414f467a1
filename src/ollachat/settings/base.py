"""Abstract base class for settings storage backends.

This module defines the interface for durable key/value storage.
The abstraction hides:
- Storage format (JSON file, in-memory dict)
- Persistence mechanism and location
"""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract string key/value store.

    Values are stored as raw strings; callers decide the encoding
    (settings use JSON literals such as "true").
    """

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store a value, persisting it immediately."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key if present."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
