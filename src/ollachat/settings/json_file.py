"""JSON file settings backend.

Keeps every key in a single JSON object on disk. The whole file is
rewritten on each change, via a temporary file and an atomic rename.
"""

import json
import logging
from pathlib import Path

from .base import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path("~/.config/ollachat/settings.json")


class JsonFileStore(KeyValueStore):
    """File-backed key/value store.

    Persists across runs. An unreadable or corrupt file is treated as
    empty and replaced on the next write.
    """

    def __init__(self, path: str | Path = DEFAULT_SETTINGS_PATH):
        self._path = Path(path).expanduser()
        self._items = self._load()

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", self._path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring settings file %s: not a JSON object", self._path)
            return {}
        return {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in data.items()}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(self._items, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self._path)

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._flush()

    @property
    def backend_type(self) -> str:
        return "file"

    @property
    def path(self) -> Path:
        return self._path
