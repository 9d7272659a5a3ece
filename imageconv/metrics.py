"""In-process filter statistics.

Handlers record how often each filter ran, how often it failed and how long
it took. Nothing leaves the process; read a copy with ``snapshot()``.

Usage:
    from imageconv.metrics import metrics
    with metrics.track("pillow.scale"):
        ...
    metrics.snapshot()["applied"]["pillow.scale"]
"""

from __future__ import annotations

import time
from collections import defaultdict
from collections.abc import Iterator
from contextlib import contextmanager
from threading import RLock
from typing import Any


class FilterMetrics:
    def __init__(self) -> None:
        self._applied: dict[str, int] = defaultdict(int)
        self._failed: dict[str, int] = defaultdict(int)
        self._durations: dict[str, list[float]] = defaultdict(list)
        self._lock = RLock()

    @contextmanager
    def track(self, key: str) -> Iterator[None]:
        """Count the wrapped block as applied, or failed if it raises."""
        start = time.perf_counter()
        try:
            yield
        except BaseException:
            with self._lock:
                self._failed[key] += 1
            raise
        elapsed = time.perf_counter() - start
        with self._lock:
            self._applied[key] += 1
            self._durations[key].append(elapsed)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "applied": dict(self._applied),
                "failed": dict(self._failed),
                "durations": {k: list(v) for k, v in self._durations.items()},
            }

    def reset(self) -> None:
        with self._lock:
            self._applied.clear()
            self._failed.clear()
            self._durations.clear()


metrics = FilterMetrics()
