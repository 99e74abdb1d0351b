from __future__ import annotations

import re
import typing as t

import redis.asyncio as redis_asyncio
from redis.exceptions import RedisError

from ..errors import StorageError
from .base import StorageBackend

_GLOB_CHARS = re.compile(r"([*?\[\]\\])")


class RedisBackend(StorageBackend):
    """Redis-backed storage.

    - Entries are stored as raw bytes at key: `{prefix}:cache:{key}`
    - `keys()` walks the namespace with SCAN, never KEYS
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        *,
        prefix: str = "sofra",
        timeout_seconds: t.Optional[float] = None,
        client: t.Any = None,
    ) -> None:
        self._url = url
        self._prefix = prefix.rstrip(":")
        if client is None:
            client = redis_asyncio.from_url(
                url,
                decode_responses=False,
                socket_timeout=timeout_seconds,
                socket_connect_timeout=timeout_seconds,
            )
        self._redis = client

    def _entry_key(self, key: str) -> str:
        return f"{self._prefix}:cache:{key}"

    @property
    def _namespace(self) -> str:
        return f"{self._prefix}:cache:"

    async def read(self, key: str) -> t.Optional[bytes]:
        try:
            raw = await self._redis.get(self._entry_key(key))
        except RedisError as exc:
            raise StorageError(str(exc), op="read", key=key) from exc
        if raw is None:
            return None
        if isinstance(raw, str):
            return raw.encode("utf-8")
        return bytes(raw)

    async def write(self, key: str, data: bytes) -> None:
        try:
            await self._redis.set(self._entry_key(key), data)
        except RedisError as exc:
            raise StorageError(str(exc), op="write", key=key) from exc

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(self._entry_key(key))
        except RedisError as exc:
            raise StorageError(str(exc), op="delete", key=key) from exc

    async def keys(self) -> t.List[str]:
        namespace = self._namespace
        match = _GLOB_CHARS.sub(r"\\\1", namespace) + "*"
        found: t.List[str] = []
        try:
            async for raw in self._redis.scan_iter(match=match, count=100):
                name = raw.decode("utf-8") if isinstance(raw, bytes) else raw
                found.append(name[len(namespace) :])
        except RedisError as exc:
            raise StorageError(str(exc), op="keys") from exc
        return found

    async def is_healthy(self) -> bool:
        try:
            pong = await self._redis.ping()
            return bool(pong)
        except RedisError:
            return False

    async def close(self) -> None:  # pragma: no cover - convenience
        await self._redis.aclose()
