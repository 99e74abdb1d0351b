from __future__ import annotations

import logging
import typing as t

import httpx

from ..errors import UpstreamError
from ..utils.config import ApiConfig

_logger = logging.getLogger(__name__)


class SofraApiClient:
    """Thin JSON client for the Sofra REST API.

    Every failure, whether transport-level or a non-2xx response, is raised
    as :class:`UpstreamError` so callers can tell it apart from cache
    storage failures.
    """

    def __init__(
        self,
        config: t.Optional[ApiConfig] = None,
        *,
        token: t.Optional[str] = None,
        client: t.Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config or ApiConfig()
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self._config.base_url.rstrip("/") + "/",
            timeout=self._config.timeout_seconds,
            headers=headers,
        )
        if not self._owns_client and token:
            self._client.headers["Authorization"] = f"Bearer {token}"

    async def get_json(self, path: str, params: t.Optional[t.Dict[str, t.Any]] = None) -> t.Any:
        url = path.lstrip("/")
        try:
            r = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            _logger.warning("GET %s failed: %s", path, exc)
            raise UpstreamError(f"request failed: {exc}", url=path) from exc
        if r.is_error:
            raise UpstreamError(
                f"GET {path} returned {r.status_code}",
                status_code=r.status_code,
                url=path,
            )
        try:
            return r.json()
        except ValueError as exc:
            raise UpstreamError(f"GET {path} returned invalid JSON", status_code=r.status_code, url=path) from exc

    def producer(self, path: str, params: t.Optional[t.Dict[str, t.Any]] = None) -> t.Callable[[], t.Awaitable[t.Any]]:
        async def _produce() -> t.Any:
            return await self.get_json(path, params)

        return _produce

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "SofraApiClient":
        return self

    async def __aexit__(self, *exc_info: t.Any) -> None:
        await self.aclose()
