from __future__ import annotations

import datetime
import logging
import math
import time
import typing as t

from ..errors import StorageError
from ..monitoring.metrics import (
    cache_l1_requests_total,
    cache_storage_errors_total,
    cache_storage_latency_seconds,
)
from ..storage.base import StorageBackend
from .l1_cache import TTLCache
from .models import CacheEntry

_logger = logging.getLogger(__name__)

T = t.TypeVar("T")
TTL = t.Union[float, int, datetime.timedelta]
Clock = t.Callable[[], float]


def ttl_seconds(ttl: TTL) -> float:
    if isinstance(ttl, datetime.timedelta):
        seconds = ttl.total_seconds()
    else:
        seconds = float(ttl)
    if not math.isfinite(seconds):
        raise ValueError(f"ttl must be finite, got {seconds}")
    if seconds < 0:
        raise ValueError(f"ttl must be non-negative, got {seconds}")
    return seconds


class CacheStore:
    """Key -> :class:`CacheEntry` store with lazy expiry over a byte backend.

    Entries are JSON-encoded at the backend boundary. Expiry is checked only
    when an entry is read; stale entries stay in the backend until they are
    overwritten, removed, purged, or read with ``delete_expired=True``.

    An optional in-process ``l1`` tier answers repeated reads without backend
    I/O. It is filled on durable reads, written through on ``set`` and
    evicted on ``remove``; it holds an entry for at most its own TTL and never
    past the entry's expiry.

    Every backend failure surfaces as :class:`StorageError`. A missing or
    expired key is a normal outcome and never raises.
    """

    def __init__(
        self,
        backend: StorageBackend,
        *,
        clock: t.Optional[Clock] = None,
        delete_expired: bool = False,
        l1: t.Optional[TTLCache] = None,
    ) -> None:
        self._backend = backend
        self._clock = clock or time.time
        self._delete_expired = delete_expired
        self._l1 = l1

    @classmethod
    def with_l1(
        cls,
        backend: StorageBackend,
        *,
        max_size: int = 1000,
        ttl_seconds: float = 60.0,
        clock: t.Optional[Clock] = None,
        delete_expired: bool = False,
    ) -> "CacheStore":
        clock = clock or time.time
        return cls(
            backend,
            clock=clock,
            delete_expired=delete_expired,
            l1=TTLCache(max_size=max_size, ttl_seconds=ttl_seconds, clock=clock),
        )

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    @property
    def l1(self) -> t.Optional[TTLCache]:
        return self._l1

    def now(self) -> float:
        return self._clock()

    async def _call(self, op: str, key: t.Optional[str], fn: t.Callable[[], t.Awaitable[T]]) -> T:
        try:
            with cache_storage_latency_seconds.time(op=op):
                return await fn()
        except StorageError:
            cache_storage_errors_total.inc(op=op)
            _logger.warning("Storage %s failed for key=%s", op, key)
            raise
        except Exception as exc:  # noqa: BLE001 - every backend failure is a storage failure
            cache_storage_errors_total.inc(op=op)
            _logger.warning("Storage %s failed for key=%s: %s", op, key, exc)
            raise StorageError(str(exc) or type(exc).__name__, op=op, key=key) from exc

    def _remember(self, entry: CacheEntry) -> None:
        if self._l1 is None:
            return
        remaining = entry.remaining(self.now())
        if remaining <= 0:
            self._l1.delete(entry.key)
            return
        self._l1.set(entry.key, entry, min(self._l1.default_ttl, remaining))

    async def get_entry(self, key: str) -> t.Optional[CacheEntry]:
        """Return the durable entry for ``key`` whether or not it has expired.

        Always reads the backend; the L1 tier is not consulted.
        """
        raw = await self._call("read", key, lambda: self._backend.read(key))
        if raw is None:
            return None
        try:
            return CacheEntry.from_bytes(raw)
        except (ValueError, KeyError, TypeError) as exc:
            raise StorageError(f"corrupt entry: {exc}", op="decode", key=key) from exc

    async def get(self, key: str, default: t.Any = None) -> t.Any:
        now = self.now()
        if self._l1 is not None:
            cached = self._l1.get(key)
            if cached is not None and cached.is_valid(now):
                cache_l1_requests_total.inc(result="hit")
                return cached.value
            self._l1.delete(key)
            cache_l1_requests_total.inc(result="miss")

        entry = await self.get_entry(key)
        if entry is None:
            return default
        if entry.is_valid(now):
            self._remember(entry)
            return entry.value
        if self._delete_expired:
            _logger.debug("Dropping expired entry key=%s", key)
            await self.remove(key)
        return default

    async def set(self, key: str, value: t.Any, ttl: TTL) -> CacheEntry:
        seconds = ttl_seconds(ttl)
        entry = CacheEntry(key=key, value=value, expires_at=self.now() + seconds)
        try:
            payload = entry.to_bytes()
        except (TypeError, ValueError) as exc:
            raise TypeError(f"value for key {key!r} is not JSON-serializable: {exc}") from exc
        if self._l1 is not None:
            # a failed durable write must not leave the previous value in L1
            self._l1.delete(key)
        await self._call("write", key, lambda: self._backend.write(key, payload))
        self._remember(entry)
        return entry

    async def remove(self, key: str) -> None:
        if self._l1 is not None:
            self._l1.delete(key)
        await self._call("delete", key, lambda: self._backend.delete(key))

    async def keys(self) -> t.List[str]:
        return await self._call("keys", None, self._backend.keys)

    async def purge_expired(self) -> int:
        """Delete every stale entry; returns how many were removed.

        Entries that cannot be decoded are removed as well.
        """
        now = self.now()
        removed = 0
        for key in await self.keys():
            try:
                entry = await self.get_entry(key)
            except StorageError as exc:
                if exc.op != "decode":
                    raise
            else:
                if entry is None or entry.is_valid(now):
                    continue
            await self.remove(key)
            removed += 1
        if removed:
            _logger.info("Purged %d expired cache entries", removed)
        return removed

    async def clear_by_pattern(self, pattern: str) -> int:
        """Remove every entry whose key contains ``pattern``; returns the count.

        ``clear_by_pattern("menu:")`` drops every cached menu.
        """
        matched = [key for key in await self.keys() if pattern in key]
        for key in matched:
            await self.remove(key)
        if self._l1 is not None:
            for key in self._l1.keys():
                if pattern in key:
                    self._l1.delete(key)
        _logger.debug("Cleared %d entries matching %r", len(matched), pattern)
        return len(matched)

    async def clear(self) -> int:
        keys = await self.keys()
        for key in keys:
            await self.remove(key)
        if self._l1 is not None:
            self._l1.clear()
        return len(keys)

    async def is_healthy(self) -> bool:
        return await self._backend.is_healthy()

    async def close(self) -> None:
        await self._backend.close()
