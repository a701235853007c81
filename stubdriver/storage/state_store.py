"""
Workspace state persistence.

This module defines the StateStore interface used by the Workspace to
save and restore its collections, with an in-memory implementation and
a JSON file implementation. Every collection is stored under its own key,
"<namespace>_<collection>".
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, Optional

from stubdriver.core.errors import StorageError

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "stub_driver"


class StateStore(ABC):
    """
    Key-value store for JSON-serializable collections.

    Implementations only need to provide the raw key operations; the
    namespaced key scheme lives here.
    """

    def __init__(self, namespace: str = DEFAULT_NAMESPACE):
        self.namespace = namespace

    def key(self, collection: str) -> str:
        """Storage key of a collection, e.g. "stub_driver_sequence_diagrams"."""
        return f"{self.namespace}_{collection}"

    def load(self, collection: str, default: Any = None) -> Any:
        """
        Load the last saved value of a collection.

        Args:
            collection: Collection name
            default: Returned when nothing was saved

        Returns:
            The saved value or default
        """
        value = self._read(self.key(collection))
        return default if value is None else value

    def save(self, collection: str, value: Any) -> None:
        """
        Persist a collection.

        Args:
            collection: Collection name
            value: JSON-serializable value
        """
        self._write(self.key(collection), value)
        logger.debug(f"Saved {self.key(collection)}")

    def keys(self) -> Iterator[str]:
        prefix = f"{self.namespace}_"
        return (k for k in self._keys() if k.startswith(prefix))

    def clear(self) -> None:
        """Remove every collection of this namespace."""
        for key in list(self.keys()):
            self._remove(key)

    @abstractmethod
    def _read(self, key: str) -> Optional[Any]:
        """Return the stored value, or None."""

    @abstractmethod
    def _write(self, key: str, value: Any) -> None:
        """Store a value."""

    @abstractmethod
    def _remove(self, key: str) -> None:
        """Remove a key if present."""

    @abstractmethod
    def _keys(self) -> Iterator[str]:
        """All stored keys."""


class InMemoryStateStore(StateStore):
    """Store kept in a dict; values are JSON round-tripped so callers never share objects."""

    def __init__(self, namespace: str = DEFAULT_NAMESPACE):
        super().__init__(namespace)
        self._data: Dict[str, str] = {}

    def _read(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def _write(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key} is not JSON-serializable", {"error": str(e)}) from e

    def _remove(self, key: str) -> None:
        self._data.pop(key, None)

    def _keys(self) -> Iterator[str]:
        return iter(list(self._data))


class JsonFileStateStore(StateStore):
    """
    Store writing one JSON file per key into a directory.

    Writes go to a temporary file that replaces the target, so a crash
    never leaves a half-written collection behind.
    """

    def __init__(self, directory: str, namespace: str = DEFAULT_NAMESPACE):
        """
        Initialize the store.

        Args:
            directory: Directory holding the JSON files (created if missing)
            namespace: Key prefix
        """
        super().__init__(namespace)
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def _read(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not os.path.isfile(path):
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read {path}", {"error": str(e)}) from e

    def _write(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp_path = f"{path}.tmp"
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(value, f, indent=2)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Cannot write {path}", {"error": str(e)}) from e

    def _remove(self, key: str) -> None:
        path = self._path(key)
        if os.path.isfile(path):
            os.remove(path)

    def _keys(self) -> Iterator[str]:
        for name in sorted(os.listdir(self.directory)):
            if name.endswith(".json"):
                yield name[: -len(".json")]
