from __future__ import annotations

import logging
import typing as t

from sofra_cache.cache.store import TTL

from .accessor import FetchThroughCache, Producer

_logger = logging.getLogger(__name__)

T = t.TypeVar("T")
ErrorCallback = t.Callable[[BaseException], None]


class CacheResource(t.Generic[T]):
    """A key and producer bound to a :class:`FetchThroughCache`.

    Keeps the last loaded ``data``, the last ``error`` and a ``loading``
    flag for screens that render from state rather than awaiting results.
    Failures are recorded and handed to ``on_error``; they are re-raised
    only when ``raise_errors`` is set.
    """

    def __init__(
        self,
        cache: FetchThroughCache,
        key: str,
        producer: Producer[T],
        *,
        ttl: t.Optional[TTL] = None,
        enabled: bool = True,
        on_error: t.Optional[ErrorCallback] = None,
        raise_errors: bool = False,
    ) -> None:
        self._cache = cache
        self.key = key
        self._producer = producer
        self._ttl = ttl
        self.enabled = enabled
        self._on_error = on_error
        self._raise_errors = raise_errors
        self.data: t.Optional[T] = None
        self.error: t.Optional[BaseException] = None
        self.loading = False

    async def load(self) -> t.Optional[T]:
        if not self.enabled:
            return self.data
        return await self._run(lambda: self._cache.get(self.key, self._producer, self._ttl))

    async def refetch(self) -> t.Optional[T]:
        return await self._run(lambda: self._cache.get(self.key, self._producer, self._ttl))

    async def invalidate(self) -> t.Optional[T]:
        return await self._run(lambda: self._cache.invalidate(self.key, self._producer, self._ttl))

    async def _run(self, fn: t.Callable[[], t.Awaitable[T]]) -> t.Optional[T]:
        self.loading = True
        self.error = None
        try:
            self.data = await fn()
        except Exception as exc:
            self.error = exc
            _logger.debug("Resource %s failed: %r", self.key, exc)
            if self._on_error is not None:
                self._on_error(exc)
            if self._raise_errors:
                raise
        finally:
            self.loading = False
        return self.data
