"""
Storage abstraction for provider configurations.

The configuration store sits on a plain key/value backend, allowing
different backends (filesystem, memory, custom) to be injected.
"""

from abc import ABC, abstractmethod
from typing import Any


class KeyValueStore(ABC):
    """Abstract key/value backend.

    Values are JSON-compatible. Writes are last-write-wins; no
    transactional guarantees are required.
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under `key`, or `default` when absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store `value` under `key`, replacing any previous value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove `key` if present."""
        pass


from .config_store import ACTIVE_CONFIG_KEY, CONFIGS_KEY, ConfigStore  # noqa: E402
from .file_storage import JsonFileKeyValueStore  # noqa: E402
from .memory_storage import InMemoryKeyValueStore  # noqa: E402

__all__ = [
    "ACTIVE_CONFIG_KEY",
    "CONFIGS_KEY",
    "ConfigStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
]
