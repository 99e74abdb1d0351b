from __future__ import annotations

from ..utils.config import StorageConfig
from .base import InMemoryBackend, StorageBackend
from .file_adapter import FileBackend
from .redis_adapter import RedisBackend


def build_backend(config: StorageConfig) -> StorageBackend:
    kind = config.type.lower()
    if kind == "memory":
        return InMemoryBackend()
    if kind == "file":
        if not config.path:
            raise ValueError("storage.path is required for the file backend")
        return FileBackend(config.path)
    if kind == "redis":
        return RedisBackend(
            config.connection_string or "redis://localhost:6379/0",
            prefix=config.prefix,
            timeout_seconds=config.timeout_seconds,
        )
    raise ValueError(f"Unknown storage type: {config.type!r}")
