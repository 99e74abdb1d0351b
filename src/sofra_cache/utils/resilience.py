from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, List, Optional, Tuple, Type, TypeVar

T = TypeVar("T")

_logger = logging.getLogger(__name__)


async def with_retries(
    coro_factory: Callable[[], Awaitable[T]],
    attempts: int = 3,
    backoff_ms: Optional[Iterable[int]] = None,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
) -> T:
    """Await ``coro_factory()`` up to ``attempts`` times.

    Only exceptions matching ``retry_on`` are retried; anything else
    propagates on the first occurrence. Pass ``retry_on=(ProducerError,)`` to
    retry upstream failures while letting storage failures through.
    """
    backoff_seq: List[int] = list(backoff_ms or [100, 500, 2000])
    last_exc: BaseException | None = None
    for attempt in range(attempts):
        try:
            return await coro_factory()
        except retry_on as exc:
            last_exc = exc
            if attempt == attempts - 1:
                break
            delay_ms = backoff_seq[min(attempt, len(backoff_seq) - 1)]
            _logger.debug("Attempt %d failed (%r); retrying in %dms", attempt + 1, exc, delay_ms)
            await asyncio.sleep(delay_ms / 1000.0)
    assert last_exc is not None
    raise last_exc
