"""In-process counters and histograms for cache activity."""

from .metrics import (
    Counter,
    Histogram,
    cache_l1_requests_total,
    cache_producer_failures_total,
    cache_requests_total,
    cache_storage_errors_total,
    cache_storage_latency_seconds,
    reset_all,
)

__all__ = [
    "Counter",
    "Histogram",
    "cache_requests_total",
    "cache_producer_failures_total",
    "cache_l1_requests_total",
    "cache_storage_errors_total",
    "cache_storage_latency_seconds",
    "reset_all",
]
