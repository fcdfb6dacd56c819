from __future__ import annotations

import threading
from typing import Dict

from ..errors import NotFound, StorageWriteError
from .base import Storage


class InMemoryStorage(Storage):
    """Dict-backed storage; one lock guards the whole mapping."""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str:
        with self._lock:
            try:
                return self._data[key]
            except KeyError:
                raise NotFound(key) from None

    def put(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def post(self, key: str, value: str) -> None:
        with self._lock:
            if key in self._data:
                raise StorageWriteError(f"Key already exists: {key}")
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            if self._data.pop(key, None) is None:
                raise NotFound(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
