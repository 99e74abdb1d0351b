from __future__ import annotations

import json
import typing as t
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: t.Any
    expires_at: float

    def is_valid(self, now: float) -> bool:
        # An entry expiring exactly now is already stale.
        return now < self.expires_at

    def remaining(self, now: float) -> float:
        return max(0.0, self.expires_at - now)

    def to_bytes(self) -> bytes:
        return json.dumps(asdict(self), separators=(",", ":")).encode("utf-8")

    @classmethod
    def from_bytes(cls, raw: bytes) -> "CacheEntry":
        data = json.loads(raw.decode("utf-8"))
        return cls(key=data["key"], value=data["value"], expires_at=float(data["expires_at"]))
