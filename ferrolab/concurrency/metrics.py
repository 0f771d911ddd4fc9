"""Thread-safe counters: one with a fixed set of names, one open-ended."""

from __future__ import annotations

import threading
from collections.abc import Iterable


def _render(counters: dict[str, int]) -> str:
    return "".join(f"{key}: {value}\n" for key, value in counters.items())


class AmapMetrics:
    """Counters for a fixed set of metric names given up front."""

    def __init__(self, metric_names: Iterable[str]) -> None:
        self._lock = threading.Lock()
        self._data: dict[str, int] = dict.fromkeys(metric_names, 0)

    def inc(self, key: str) -> None:
        """Add one to ``key``; raise KeyError if it is not a known metric."""
        with self._lock:
            if key not in self._data:
                raise KeyError(f"key {key} not found")
            self._data[key] += 1

    def snapshot(self) -> dict[str, int]:
        """Return a copy of the current counts."""
        with self._lock:
            return dict(self._data)

    def __str__(self) -> str:
        return _render(self.snapshot())


class CmapMetrics:
    """Counters created on first use."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: dict[str, int] = {}

    def _add(self, key: str, delta: int) -> None:
        with self._lock:
            self._data[key] = self._data.get(key, 0) + delta

    def inc(self, key: str) -> None:
        """Add one to ``key``."""
        self._add(key, 1)

    def dec(self, key: str) -> None:
        """Subtract one from ``key``."""
        self._add(key, -1)

    def snapshot(self) -> dict[str, int]:
        """Return a copy of the current counts."""
        with self._lock:
            return dict(self._data)

    def __str__(self) -> str:
        return _render(self.snapshot())