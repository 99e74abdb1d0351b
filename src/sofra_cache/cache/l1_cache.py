from __future__ import annotations

import time
import typing as t
from collections import OrderedDict


class TTLCache:
    """Simple LRU + TTL cache for the per-process L1 tier.

    Sits in front of the durable backend; suitable for small working sets.
    """

    def __init__(
        self,
        max_size: int = 1000,
        ttl_seconds: float = 60.0,
        *,
        clock: t.Optional[t.Callable[[], float]] = None,
    ) -> None:
        self._store: "OrderedDict[str, tuple[float, t.Any]]" = OrderedDict()
        self._max_size = max_size
        self._ttl = ttl_seconds
        self._clock = clock or time.time

    @property
    def default_ttl(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: str) -> bool:
        return key in self._store

    def get(self, key: str) -> t.Optional[t.Any]:
        now = self._clock()
        item = self._store.get(key)
        if item is None:
            return None
        expires_at, value = item
        if expires_at <= now:
            self._store.pop(key, None)
            return None
        # mark as recently used
        self._store.move_to_end(key)
        return value

    def set(self, key: str, value: t.Any, ttl_seconds: t.Optional[float] = None) -> None:
        ttl = self._ttl if ttl_seconds is None else ttl_seconds
        expires_at = self._clock() + ttl
        self._store[key] = (expires_at, value)
        self._store.move_to_end(key)
        while len(self._store) > max(self._max_size, 0):
            # evict LRU
            self._store.popitem(last=False)

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def keys(self) -> t.List[str]:
        return list(self._store)

    def clear(self) -> None:
        self._store.clear()
