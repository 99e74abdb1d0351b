"""Configuration and caller-side resilience helpers."""

from .config import ApiConfig, CacheConfig, CacheDurations, SofraCacheConfig, StorageConfig
from .resilience import with_retries

__all__ = [
    "ApiConfig",
    "CacheConfig",
    "CacheDurations",
    "SofraCacheConfig",
    "StorageConfig",
    "with_retries",
]
