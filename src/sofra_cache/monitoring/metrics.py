from __future__ import annotations

import time
import typing as t
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass
class Counter:
    name: str
    help: str
    values: Dict[Tuple, float] = field(default_factory=dict)

    def inc(self, value: float = 1.0, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        self.values[key] = self.values.get(key, 0.0) + value

    def get(self, **labels: Any) -> float:
        return self.values.get(tuple(sorted(labels.items())), 0.0)

    def reset(self) -> None:
        self.values.clear()


@dataclass
class Histogram:
    name: str
    help: str
    buckets: List[float]
    counts: Dict[Tuple, List[int]] = field(default_factory=dict)

    def observe(self, val: float, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        if key not in self.counts:
            # trailing slot is +Inf
            self.counts[key] = [0 for _ in range(len(self.buckets) + 1)]
        for i, b in enumerate(self.buckets):
            if val <= b:
                self.counts[key][i] += 1
                return
        self.counts[key][-1] += 1

    def total(self, **labels: Any) -> int:
        return sum(self.counts.get(tuple(sorted(labels.items())), []))

    @contextmanager
    def time(self, **labels: Any) -> t.Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            self.observe(time.perf_counter() - start, **labels)

    def reset(self) -> None:
        self.counts.clear()


# Predefined metrics
cache_requests_total = Counter("cache_requests_total", "Fetch-through lookups by result (hit|miss)")
cache_producer_failures_total = Counter("cache_producer_failures_total", "Producer calls that raised")
cache_l1_requests_total = Counter("cache_l1_requests_total", "In-process L1 lookups by result (hit|miss)")
cache_storage_errors_total = Counter("cache_storage_errors_total", "Storage operations that raised, by op")
cache_storage_latency_seconds = Histogram(
    "cache_storage_latency_seconds",
    "Storage operation latency",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

ALL_METRICS: t.List[t.Union[Counter, Histogram]] = [
    cache_requests_total,
    cache_l1_requests_total,
    cache_producer_failures_total,
    cache_storage_errors_total,
    cache_storage_latency_seconds,
]


def reset_all() -> None:
    for metric in ALL_METRICS:
        metric.reset()
