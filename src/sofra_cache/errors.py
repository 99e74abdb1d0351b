from __future__ import annotations

import typing as t


class CacheError(Exception):
    """Base class for every error raised by sofra_cache."""


class StorageError(CacheError):
    """The durable store could not complete a read, write or delete."""

    def __init__(self, message: str, *, op: str, key: t.Optional[str] = None) -> None:
        super().__init__(message)
        self.op = op
        self.key = key

    def __str__(self) -> str:
        base = super().__str__()
        if self.key is None:
            return f"{self.op}: {base}"
        return f"{self.op} {self.key!r}: {base}"


class ProducerError(CacheError):
    """A producer failed to compute a fresh value.

    Producers shipped with this package raise subclasses of this. Producers
    written by callers may raise anything; the accessor passes their
    exceptions through unchanged.
    """


class UpstreamError(ProducerError):
    def __init__(self, message: str, *, status_code: t.Optional[int] = None, url: t.Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url
