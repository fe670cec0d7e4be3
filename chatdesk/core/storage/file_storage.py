"""
Filesystem-based key/value storage.

Stores every key in a single JSON document, ~/.chatdesk/config.json by
default, with owner-only permissions since it holds API keys.
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from chatdesk.core.exceptions import StorageError

from . import KeyValueStore

_logger = logging.getLogger(__name__)

FILE_PERMISSIONS = 0o600


class JsonFileKeyValueStore(KeyValueStore):
    """JSON-file key/value store.

    Every write re-reads the document, updates one key and atomically
    replaces the file, so concurrent writers resolve last-write-wins
    rather than corrupting it.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    def _read_document(self) -> dict[str, Any]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            _logger.error("Corrupted config store %s: %s", self.path, e)
            raise StorageError(f"Invalid data in {self.path}: {e}") from e
        except OSError as e:
            _logger.error("Failed to read config store %s: %s", self.path, e)
            raise StorageError(f"Cannot read config store: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"Invalid data in {self.path}: expected a JSON object")
        return data

    def _write_document(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    if hasattr(os, "fchmod"):
                        os.fchmod(f.fileno(), FILE_PERMISSIONS)
                    json.dump(data, f, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            _logger.error("Failed to write config store %s: %s", self.path, e)
            raise StorageError(f"Cannot write config store: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._read_document().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read_document()
            data[key] = value
            self._write_document(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._read_document()
            if key in data:
                del data[key]
                self._write_document(data)

    def __repr__(self) -> str:
        return f"JsonFileKeyValueStore(path={str(self.path)!r})"
