"""sofra_cache

Keyed TTL cache with fetch-through access for the Sofra ordering client:
a durable key/value store with lazy expiry, an accessor that falls back to
an async producer on miss, and cached readers for the Sofra REST API.
"""

from .cache import CacheEntry, CacheStore, TTLCache
from .core import DEFAULT_TTL_SECONDS, CacheResource, FetchThroughCache
from .errors import CacheError, ProducerError, StorageError, UpstreamError
from .storage import (
    FileBackend,
    InMemoryBackend,
    RedisBackend,
    StorageBackend,
    build_backend,
)
from .utils import SofraCacheConfig, with_retries

__all__ = [
    "CacheStore",
    "CacheEntry",
    "TTLCache",
    "FetchThroughCache",
    "CacheResource",
    "DEFAULT_TTL_SECONDS",
    "CacheError",
    "StorageError",
    "ProducerError",
    "UpstreamError",
    "StorageBackend",
    "InMemoryBackend",
    "FileBackend",
    "RedisBackend",
    "build_backend",
    "SofraCacheConfig",
    "with_retries",
]

__version__ = "0.1.0"
