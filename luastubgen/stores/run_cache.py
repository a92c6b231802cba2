"""In-memory caches scoped to one generation run."""

from __future__ import annotations

import threading
from typing import Callable, Dict, Generic, Iterator, Optional, TypeVar

from ..logging import get_logger

V = TypeVar("V")


class RunCache(Generic[V]):
    """Write-once cache keyed by type identity.

    Values are computed outside the lock; when two workers race on the same
    key the first stored value wins and every caller receives it.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: Dict[str, V] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._logger = get_logger("stores")

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            value = self._entries.get(key)
            if value is not None:
                self._hits += 1
            return value

    def store(self, key: str, value: V) -> V:
        """Store ``value`` unless ``key`` is already present; return the cached value."""
        with self._lock:
            existing = self._entries.setdefault(key, value)
        if existing is not value:
            self._logger.debug("%s cache kept first value for %s", self.name, key)
        return existing

    def get_or_compute(self, key: str, compute: Callable[[], V]) -> V:
        cached = self.get(key)
        if cached is not None:
            return cached
        with self._lock:
            self._misses += 1
        return self.store(key, compute())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {"entries": len(self._entries), "hits": self._hits, "misses": self._misses}

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._entries))


__all__ = ["RunCache"]
