"""Thread-safe key/value store for an execution context's configuration.

Every operation takes the store's own lock, so a ``clear()`` running in one
session can never interleave with a ``get()`` or ``set()`` in another.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping


class ConfigurationStore:
    """String-to-string configuration map guarded by a single lock."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._lock = threading.Lock()
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str, default: str | None = None) -> str | None:
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> bool:
        """Remove *key*; return True if it was present."""
        with self._lock:
            return self._data.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def contains(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def to_dict(self) -> dict[str, str]:
        """Return a point-in-time copy of the whole map."""
        with self._lock:
            return dict(self._data)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data
