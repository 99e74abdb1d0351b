from .l1_cache import TTLCache
from .models import CacheEntry
from .store import CacheStore, ttl_seconds

__all__ = ["CacheEntry", "CacheStore", "TTLCache", "ttl_seconds"]
