"""Factory for creating settings storage backends."""

from typing import Any

from .base import KeyValueStore


def create_settings_store(
    backend: str = "file",
    **kwargs: Any
) -> KeyValueStore:
    """Create a settings storage backend.

    Args:
        backend: Backend type ("file" or "memory")
        **kwargs: Backend-specific configuration
            For file:
                - path: str | Path (default: ~/.config/ollachat/settings.json)
            For memory:
                - initial: dict[str, str] | None

    Returns:
        KeyValueStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "file":
        from .json_file import JsonFileStore
        return JsonFileStore(**kwargs)

    elif backend == "memory":
        from .in_memory import InMemoryStore
        return InMemoryStore(**kwargs)

    raise ValueError(
        f"Unsupported settings backend: {backend}. "
        f"Supported backends: file, memory"
    )
