"""Shared fixtures and mocks for unit tests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from sofra_cache.cache.store import CacheStore
from sofra_cache.core.accessor import FetchThroughCache
from sofra_cache.monitoring import metrics
from sofra_cache.storage.base import InMemoryBackend


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SequenceProducer:
    """Async producer returning the given values in order, counting calls.

    Exceptions in the sequence are raised instead of returned. The last
    item repeats once the sequence is exhausted.
    """

    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    async def __call__(self):
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        if isinstance(value, BaseException):
            raise value
        return value


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.reset_all()
    yield
    metrics.reset_all()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def store(backend, clock):
    return CacheStore(backend, clock=clock)


@pytest.fixture
def cache(store):
    return FetchThroughCache(store)


@pytest.fixture
def mock_backend():
    """Mock storage backend."""
    backend = AsyncMock()
    backend.read = AsyncMock(return_value=None)
    backend.write = AsyncMock(return_value=None)
    backend.delete = AsyncMock(return_value=None)
    backend.keys = AsyncMock(return_value=[])
    backend.is_healthy = AsyncMock(return_value=True)
    backend.close = AsyncMock(return_value=None)
    return backend


@pytest.fixture
def mock_redis_client():
    """Mock Redis client."""
    client = AsyncMock()
    client.ping = AsyncMock(return_value=True)
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    return client


@pytest.fixture
def restaurants():
    """Sample restaurant list payload."""
    return [
        {"id": "1", "name": "Sofra Kebap", "category": "Turkish"},
        {"id": "2", "name": "Deniz Balik", "category": "Seafood"},
    ]


@pytest.fixture
def make_producer():
    """Factory for SequenceProducer instances."""
    return SequenceProducer
