from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

_ENV_PREFIX = "SOFRA_CACHE_"


@dataclass
class StorageConfig:
    type: str = "memory"  # memory | file | redis
    connection_string: Optional[str] = None
    path: Optional[str] = None
    prefix: str = "sofra"
    timeout_seconds: float = 5.0


@dataclass
class CacheConfig:
    default_ttl_seconds: float = 300.0
    delete_expired: bool = False
    dedupe: bool = True
    l1_enabled: bool = True
    l1_max_size: int = 1000
    l1_ttl_seconds: float = 60.0


@dataclass
class ApiConfig:
    base_url: str = "https://api.sofra.com/api"
    timeout_seconds: float = 10.0


@dataclass
class CacheDurations:
    restaurants: float = 5 * 60.0
    menu_items: float = 30 * 60.0
    user_profile: float = 60 * 60.0
    orders: float = 2 * 60.0


@dataclass
class SofraCacheConfig:
    storage: StorageConfig = dataclasses.field(default_factory=StorageConfig)
    cache: CacheConfig = dataclasses.field(default_factory=CacheConfig)
    api: ApiConfig = dataclasses.field(default_factory=ApiConfig)
    durations: CacheDurations = dataclasses.field(default_factory=CacheDurations)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SofraCacheConfig":
        def build(dc_cls, key):
            values = data.get(key, {})
            return dc_cls(**values)

        return cls(
            storage=build(StorageConfig, "storage"),
            cache=build(CacheConfig, "cache"),
            api=build(ApiConfig, "api"),
            durations=build(CacheDurations, "durations"),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SofraCacheConfig":
        """Build a config from ``SOFRA_CACHE_<SECTION>_<FIELD>`` variables.

        ``SOFRA_CACHE_STORAGE_TYPE=redis`` sets ``storage.type``. Values are
        coerced to the type of the field's default; unknown variables are
        ignored.
        """
        env = os.environ if environ is None else environ
        sections = {
            "storage": StorageConfig,
            "cache": CacheConfig,
            "api": ApiConfig,
            "durations": CacheDurations,
        }
        data: Dict[str, Dict[str, Any]] = {}
        for section, dc_cls in sections.items():
            values: Dict[str, Any] = {}
            for f in dataclasses.fields(dc_cls):
                raw = env.get(f"{_ENV_PREFIX}{section.upper()}_{f.name.upper()}")
                if raw is None:
                    continue
                values[f.name] = _coerce(raw, f.default)
            data[section] = values
        return cls.from_dict(data)


def _coerce(raw: str, default: Any) -> Any:
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, float):
        return float(raw)
    if isinstance(default, int):
        return int(raw)
    return raw
