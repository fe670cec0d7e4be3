"""
In-memory key/value storage for testing and ephemeral use.

Data is lost when the process exits.
"""

import copy
from typing import Any

from . import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed key/value store.

    Values are deep-copied on the way in and out so callers cannot mutate
    stored state behind the store's back, matching the file backend.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __repr__(self) -> str:
        return f"InMemoryKeyValueStore(keys={sorted(self._data)})"
