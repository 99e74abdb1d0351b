"""Core module: the fetch-through accessor and bound resources."""

from .accessor import DEFAULT_TTL_SECONDS, FetchThroughCache, Producer
from .resource import CacheResource

__all__ = [
    "FetchThroughCache",
    "CacheResource",
    "Producer",
    "DEFAULT_TTL_SECONDS",
]
