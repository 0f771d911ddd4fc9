"""In-memory storage shared by every connection of the server."""

from __future__ import annotations

import threading

from ferrolab.resp.frames import RespFrame


class Backend:
    """Thread-safe key/value store with plain keys and hash maps."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._map: dict[str, RespFrame] = {}
        self._hmap: dict[str, dict[str, RespFrame]] = {}

    def get(self, key: str) -> RespFrame | None:
        """Return the value stored under ``key``, or None."""
        with self._lock:
            return self._map.get(key)

    def set(self, key: str, value: RespFrame) -> None:
        """Store ``value`` under ``key``, replacing any earlier value."""
        with self._lock:
            self._map[key] = value

    def hget(self, key: str, field: str) -> RespFrame | None:
        """Return ``field`` of the hash at ``key``, or None."""
        with self._lock:
            fields = self._hmap.get(key)
            return None if fields is None else fields.get(field)

    def hset(self, key: str, field: str, value: RespFrame) -> None:
        """Set ``field`` of the hash at ``key``, creating the hash if needed."""
        with self._lock:
            self._hmap.setdefault(key, {})[field] = value

    def hgetall(self, key: str) -> dict[str, RespFrame] | None:
        """Return a copy of the hash at ``key``, or None if there is none."""
        with self._lock:
            fields = self._hmap.get(key)
            return None if fields is None else dict(fields)