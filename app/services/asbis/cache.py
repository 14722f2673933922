"""Time-bounded in-process cache for vendor API payloads."""

import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple


class TTLCache:
    """
    Minimal key/value cache whose entries expire ``ttl_seconds`` after they
    were stored.

    The clock is injectable so expiry can be tested without sleeping:

        now = [0.0]
        cache = TTLCache(300, clock=lambda: now[0])
        cache.put("all_products", payload)
        now[0] += 301
        assert cache.get("all_products") is None

    Every operation holds the same lock, so a clear never
    interleaves with a read half-way through. Concurrent ``put`` calls for the
    same key are last-write-wins.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value or None when absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return value

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def evict_expired(self) -> int:
        """Drop expired entries, returning how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [
                key for key, (stored_at, _) in self._entries.items()
                if now - stored_at >= self.ttl_seconds
            ]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
