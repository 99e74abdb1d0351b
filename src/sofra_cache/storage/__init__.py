from .base import InMemoryBackend, StorageBackend
from .factory import build_backend
from .file_adapter import FileBackend
from .redis_adapter import RedisBackend

__all__ = ["StorageBackend", "InMemoryBackend", "FileBackend", "RedisBackend", "build_backend"]
