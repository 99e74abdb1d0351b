from __future__ import annotations

import hashlib
import os
import typing as t
import uuid
from pathlib import Path

import aiofiles
import aiofiles.os

from ..errors import StorageError
from .base import StorageBackend

_SUFFIX = ".json"
_HASHED_SUFFIX = ".sha256.json"
# leaves room for the ".<name>.<uuid>.tmp" sibling under the usual 255 byte limit
_MAX_NAME = 200


class FileBackend(StorageBackend):
    """Directory-backed storage, one file per key.

    - File names are the hex-encoded UTF-8 key plus ``.json`` so any key is a
      valid file name.
    - Keys whose hex name would be too long are stored under the SHA-256 of
      the key instead. Those files start with the hex key and a newline so
      ``keys()`` can still report the original key.
    - Writes land in a temporary sibling and are moved into place with
      ``os.replace``; readers never observe a half-written entry.
    """

    def __init__(self, path: t.Union[str, os.PathLike]) -> None:
        self._root = Path(path)

    @property
    def root(self) -> Path:
        return self._root

    @staticmethod
    def _is_hashed(name: str) -> bool:
        return name.endswith(_HASHED_SUFFIX)

    def _path_for(self, key: str) -> Path:
        encoded = key.encode("utf-8")
        name = encoded.hex() + _SUFFIX
        if len(name) > _MAX_NAME:
            name = hashlib.sha256(encoded).hexdigest() + _HASHED_SUFFIX
        return self._root / name

    @staticmethod
    def _key_for(name: str) -> t.Optional[str]:
        if not name.endswith(_SUFFIX) or name.endswith(_HASHED_SUFFIX):
            return None
        try:
            return bytes.fromhex(name[: -len(_SUFFIX)]).decode("utf-8")
        except ValueError:
            return None

    @staticmethod
    def _split_header(raw: bytes) -> t.Tuple[t.Optional[str], bytes]:
        header, sep, data = raw.partition(b"\n")
        if not sep:
            return None, raw
        try:
            return bytes.fromhex(header.decode("ascii")).decode("utf-8"), data
        except ValueError:
            return None, raw

    async def read(self, key: str) -> t.Optional[bytes]:
        path = self._path_for(key)
        try:
            async with aiofiles.open(path, "rb") as f:
                raw = await f.read()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(str(exc), op="read", key=key) from exc
        if not self._is_hashed(path.name):
            return raw
        stored_key, data = self._split_header(raw)
        if stored_key != key:
            raise StorageError("hashed entry does not belong to this key", op="read", key=key)
        return data

    async def write(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        if self._is_hashed(path.name):
            data = key.encode("utf-8").hex().encode("ascii") + b"\n" + data
        tmp = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
        try:
            await aiofiles.os.makedirs(self._root, exist_ok=True)
            async with aiofiles.open(tmp, "wb") as f:
                await f.write(data)
            await aiofiles.os.replace(tmp, path)
        except OSError as exc:
            try:
                await aiofiles.os.remove(tmp)
            except OSError:
                pass
            raise StorageError(str(exc), op="write", key=key) from exc

    async def delete(self, key: str) -> None:
        try:
            await aiofiles.os.remove(self._path_for(key))
        except FileNotFoundError:
            return
        except OSError as exc:
            raise StorageError(str(exc), op="delete", key=key) from exc

    async def _hashed_key(self, name: str) -> t.Optional[str]:
        try:
            async with aiofiles.open(self._root / name, "rb") as f:
                header = await f.readline()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(str(exc), op="keys") from exc
        key, _ = self._split_header(header)
        return key

    async def keys(self) -> t.List[str]:
        try:
            names = await aiofiles.os.listdir(self._root)
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageError(str(exc), op="keys") from exc
        found = []
        for name in names:
            if self._is_hashed(name):
                key = await self._hashed_key(name)
            else:
                key = self._key_for(name)
            if key is not None:
                found.append(key)
        return found

    async def is_healthy(self) -> bool:
        try:
            await aiofiles.os.makedirs(self._root, exist_ok=True)
        except OSError:
            return False
        return os.access(self._root, os.W_OK)
