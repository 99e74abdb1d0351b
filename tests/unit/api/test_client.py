"""Unit tests for SofraApiClient."""

import httpx
import pytest

from sofra_cache.api.client import SofraApiClient
from sofra_cache.errors import ProducerError, UpstreamError


def make_client(handler, token=None):
    http = httpx.AsyncClient(base_url="http://sofra.test/api/", transport=httpx.MockTransport(handler))
    return SofraApiClient(client=http, token=token)


@pytest.mark.asyncio
class TestSofraApiClient:
    """Test JSON fetching and error mapping."""

    async def test_get_json(self, restaurants):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=restaurants)

        api = make_client(handler, token="jwt-token")

        assert await api.get_json("/restaurants") == restaurants
        assert seen[0].url.path == "/api/restaurants"
        assert seen[0].headers["Authorization"] == "Bearer jwt-token"

    async def test_query_params(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"q": request.url.params["q"]})

        api = make_client(handler)
        assert await api.get_json("search", {"q": "pide"}) == {"q": "pide"}

    async def test_non_success_status(self):
        api = make_client(lambda request: httpx.Response(503, text="maintenance"))

        with pytest.raises(UpstreamError) as exc_info:
            await api.get_json("orders")

        assert exc_info.value.status_code == 503
        assert exc_info.value.url == "orders"
        assert isinstance(exc_info.value, ProducerError)

    async def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        api = make_client(handler)

        with pytest.raises(UpstreamError) as exc_info:
            await api.get_json("orders")
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_invalid_json(self):
        api = make_client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(UpstreamError, match="invalid JSON"):
            await api.get_json("restaurants")

    async def test_producer_binds_path(self):
        api = make_client(lambda request: httpx.Response(200, json={"path": request.url.path}))
        producer = api.producer("users/me")

        assert await producer() == {"path": "/api/users/me"}
