from __future__ import annotations

import typing as t
from abc import ABC, abstractmethod


class StorageBackend(ABC):
    """Durable byte store addressed by string keys.

    Implementations raise :class:`~sofra_cache.errors.StorageError` when
    the underlying medium cannot complete an operation. A missing key is not
    an error: ``read`` returns ``None`` and ``delete`` does nothing.
    """

    @abstractmethod
    async def read(self, key: str) -> t.Optional[bytes]:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def write(self, key: str, data: bytes) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def keys(self) -> t.List[str]:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def is_healthy(self) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    async def close(self) -> None:
        return None


class InMemoryBackend(StorageBackend):
    """A dict-backed backend for dev/test.

    Not durable across restarts, but implements the same async interface.
    """

    def __init__(self) -> None:
        self._data: t.Dict[str, bytes] = {}

    async def read(self, key: str) -> t.Optional[bytes]:
        return self._data.get(key)

    async def write(self, key: str, data: bytes) -> None:
        self._data[key] = bytes(data)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def keys(self) -> t.List[str]:
        return list(self._data)

    async def is_healthy(self) -> bool:
        return True
