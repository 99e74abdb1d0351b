"""Unit tests for RedisBackend."""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from sofra_cache.errors import StorageError
from sofra_cache.storage.redis_adapter import RedisBackend


class AsyncIterator:
    """Helper for creating async iterators in tests."""

    def __init__(self, items):
        self.items = list(items)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self.items:
            raise StopAsyncIteration
        return self.items.pop(0)


@pytest.mark.asyncio
class TestRedisBackend:
    """Test RedisBackend against a mocked client."""

    async def test_write_uses_prefixed_key(self, mock_redis_client):
        backend = RedisBackend(prefix="sofra:", client=mock_redis_client)

        await backend.write("restaurants", b"[]")

        mock_redis_client.set.assert_called_once_with("sofra:cache:restaurants", b"[]")

    async def test_read(self, mock_redis_client):
        mock_redis_client.get.return_value = b'{"key":"k"}'
        backend = RedisBackend(client=mock_redis_client)

        assert await backend.read("k") == b'{"key":"k"}'
        mock_redis_client.get.assert_called_once_with("sofra:cache:k")

    async def test_read_missing(self, mock_redis_client):
        backend = RedisBackend(client=mock_redis_client)
        assert await backend.read("k") is None

    async def test_read_decoded_string(self, mock_redis_client):
        mock_redis_client.get.return_value = "text"
        backend = RedisBackend(client=mock_redis_client)
        assert await backend.read("k") == b"text"

    async def test_delete(self, mock_redis_client):
        backend = RedisBackend(prefix="app", client=mock_redis_client)
        await backend.delete("k")
        mock_redis_client.delete.assert_called_once_with("app:cache:k")

    async def test_keys_strips_namespace(self, mock_redis_client):
        mock_redis_client.scan_iter = lambda **kwargs: AsyncIterator([b"sofra:cache:orders", b"sofra:cache:menu:3"])
        backend = RedisBackend(client=mock_redis_client)

        assert await backend.keys() == ["orders", "menu:3"]

    async def test_keys_escapes_glob_characters_in_prefix(self, mock_redis_client):
        seen = {}

        def scan_iter(**kwargs):
            seen.update(kwargs)
            return AsyncIterator([b"a[b*:cache:orders"])

        mock_redis_client.scan_iter = scan_iter
        backend = RedisBackend(prefix="a[b*", client=mock_redis_client)

        assert await backend.keys() == ["orders"]
        assert seen["match"] == "a\\[b\\*:cache:*"

    async def test_errors_become_storage_errors(self, mock_redis_client):
        mock_redis_client.get.side_effect = RedisConnectionError("connection refused")
        mock_redis_client.set.side_effect = RedisConnectionError("connection refused")
        mock_redis_client.delete.side_effect = RedisConnectionError("connection refused")
        backend = RedisBackend(client=mock_redis_client)

        with pytest.raises(StorageError) as exc_info:
            await backend.read("k")
        assert exc_info.value.op == "read"
        with pytest.raises(StorageError):
            await backend.write("k", b"1")
        with pytest.raises(StorageError):
            await backend.delete("k")

    async def test_is_healthy(self, mock_redis_client):
        backend = RedisBackend(client=mock_redis_client)
        assert await backend.is_healthy() is True

        mock_redis_client.ping.side_effect = RedisConnectionError("down")
        assert await backend.is_healthy() is False
