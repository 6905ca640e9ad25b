"""Persistent key-value storage."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any
import json
import logging

logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    """load(key) / save(key, value) contract."""

    @abstractmethod
    def load(self, key: str) -> Any:
        """Stored value, or None if the key was never saved."""
        ...

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        ...


class JsonFileStorage(KeyValueStorage):
    """
    Stores all keys in one JSON object on disk.

    Every save() rewrites the file synchronously. An unreadable file is
    treated as empty.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()
        self._data: dict[str, Any] | None = None

    def _read(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data

        self._data = {}
        if self.path.exists():
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    self._data = data
                else:
                    logger.warning(f"Ignoring non-object storage file {self.path}")
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Could not read storage {self.path}: {e}")
        return self._data

    def load(self, key: str) -> Any:
        return self._read().get(key)

    def save(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        logger.debug(f"Saved {key} to {self.path}")


class MemoryStorage(KeyValueStorage):
    """Process-local storage."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = dict(initial or {})

    def load(self, key: str) -> Any:
        return self.data.get(key)

    def save(self, key: str, value: Any) -> None:
        self.data[key] = value
