from __future__ import annotations

import threading
import time
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class TTLCache(Generic[T]):
    """Process-local key/value map whose entries go stale after a fixed TTL.

    Stale entries are never evicted; they are ignored on read and overwritten
    on the next write for the same key. Each process has its own copy.
    """

    def __init__(self, ttl_seconds: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: dict[str, tuple[T, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> T | None:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        value, stored_at = entry
        if self.clock() - stored_at >= self.ttl_seconds:
            return None
        return value

    def set(self, key: str, value: T) -> None:
        with self._lock:
            self._entries[key] = (value, self.clock())
