from __future__ import annotations

import asyncio
import contextlib
import itertools
import logging
import typing as t

from sofra_cache.cache.store import TTL, CacheStore, ttl_seconds
from sofra_cache.monitoring.metrics import cache_producer_failures_total, cache_requests_total
from sofra_cache.storage.factory import build_backend
from sofra_cache.utils.config import SofraCacheConfig

_logger = logging.getLogger(__name__)

T = t.TypeVar("T")
Producer = t.Callable[[], t.Awaitable[T]]

DEFAULT_TTL_SECONDS = 300.0

_MISSING = object()


class FetchThroughCache:
    """Cache-first value resolution with a caller-supplied async producer.

    ``get`` returns the stored value while it is fresh and otherwise awaits
    the producer, stores the result and returns it. Producer exceptions are
    re-raised as-is and nothing is written; :class:`StorageError` always
    means the store itself failed.

    With ``dedupe`` enabled, concurrent misses on one key share a single
    producer call.
    """

    def __init__(
        self,
        store: CacheStore,
        default_ttl: TTL = DEFAULT_TTL_SECONDS,
        *,
        dedupe: bool = True,
    ) -> None:
        self._store = store
        self._default_ttl = ttl_seconds(default_ttl)
        self._dedupe = dedupe
        self._inflight: t.Dict[str, "asyncio.Future[t.Any]"] = {}
        self._epoch_counter = itertools.count(1)
        self._epochs: t.Dict[str, int] = {}
        self._write_locks: t.Dict[str, t.List[t.Any]] = {}

    @classmethod
    def from_config(cls, config: SofraCacheConfig) -> "FetchThroughCache":
        backend = build_backend(config.storage)
        if config.cache.l1_enabled:
            store = CacheStore.with_l1(
                backend,
                max_size=config.cache.l1_max_size,
                ttl_seconds=config.cache.l1_ttl_seconds,
                delete_expired=config.cache.delete_expired,
            )
        else:
            store = CacheStore(backend, delete_expired=config.cache.delete_expired)
        return cls(store, config.cache.default_ttl_seconds, dedupe=config.cache.dedupe)

    @property
    def store(self) -> CacheStore:
        return self._store

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    def inflight(self, key: str) -> bool:
        return key in self._inflight

    async def get(self, key: str, producer: Producer[T], ttl: t.Optional[TTL] = None) -> T:
        cached = await self._store.get(key, _MISSING)
        if cached is not _MISSING:
            cache_requests_total.inc(result="hit")
            _logger.debug("Cache hit key=%s", key)
            return cached
        cache_requests_total.inc(result="miss")
        _logger.debug("Cache miss key=%s", key)
        return await self._fetch(key, producer, ttl, join=True)

    async def invalidate(self, key: str, producer: Producer[T], ttl: t.Optional[TTL] = None) -> T:
        """Drop ``key`` and resolve it again with a fresh producer call.

        The producer is always called. A fetch for ``key`` that started
        before the invalidation is not joined, and its result is never
        written over the refreshed entry.
        """
        # bump before any await so older fetches see themselves superseded
        self._epochs[key] = next(self._epoch_counter)
        await self._store.remove(key)
        _logger.debug("Invalidated key=%s", key)
        cache_requests_total.inc(result="miss")
        return await self._fetch(key, producer, ttl, join=False)

    async def _fetch(self, key: str, producer: Producer[T], ttl: t.Optional[TTL], *, join: bool) -> T:
        seconds = self._default_ttl if ttl is None else ttl_seconds(ttl)
        epoch = self._epochs.get(key)
        if not self._dedupe:
            return await self._produce_and_store(key, producer, seconds, epoch)

        task = self._inflight.get(key) if join else None
        if task is None:
            task = asyncio.ensure_future(self._produce_and_store(key, producer, seconds, epoch))
            self._inflight[key] = task
            task.add_done_callback(lambda done, k=key: self._forget(k, done))
        else:
            _logger.debug("Joining in-flight fetch key=%s", key)
        # shield: one caller giving up must not cancel the fetch for the others
        return await asyncio.shield(task)

    def _forget(self, key: str, task: "asyncio.Future[t.Any]") -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if not task.cancelled():
            # mark retrieved; waiters that went away would otherwise leave it unobserved
            task.exception()

    @contextlib.asynccontextmanager
    async def _write_lock(self, key: str) -> t.AsyncIterator[None]:
        slot = self._write_locks.get(key)
        if slot is None:
            slot = self._write_locks[key] = [asyncio.Lock(), 0]
        slot[1] += 1
        try:
            async with slot[0]:
                yield
        finally:
            slot[1] -= 1
            if slot[1] == 0:
                del self._write_locks[key]

    async def _produce_and_store(
        self,
        key: str,
        producer: Producer[T],
        ttl: float,
        epoch: t.Optional[int],
    ) -> T:
        try:
            value = await producer()
        except Exception as exc:
            cache_producer_failures_total.inc()
            _logger.warning("Producer failed for key=%s: %r", key, exc)
            raise
        # writes for one key are serialized; a write started before an
        # invalidation always lands before the refreshed one
        async with self._write_lock(key):
            if self._epochs.get(key) != epoch:
                _logger.debug("Skipping store of superseded fetch key=%s", key)
                return value
            await self._store.set(key, value, ttl)
        return value
