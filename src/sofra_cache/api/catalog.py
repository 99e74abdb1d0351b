from __future__ import annotations

import typing as t

from ..core.accessor import FetchThroughCache
from ..utils.config import CacheDurations
from .client import SofraApiClient

RESTAURANTS_KEY = "restaurants"
PROFILE_KEY = "profile"
ORDERS_KEY = "orders"


def menu_key(restaurant_id: t.Union[str, int]) -> str:
    return f"menu:{restaurant_id}"


class SofraCatalog:
    """Cached reads of the Sofra resources the customer screens render."""

    def __init__(
        self,
        api: SofraApiClient,
        cache: FetchThroughCache,
        durations: t.Optional[CacheDurations] = None,
    ) -> None:
        self._api = api
        self._cache = cache
        self._durations = durations or CacheDurations()

    async def restaurants(self) -> t.Any:
        return await self._cache.get(RESTAURANTS_KEY, self._api.producer("restaurants"), self._durations.restaurants)

    async def refresh_restaurants(self) -> t.Any:
        return await self._cache.invalidate(
            RESTAURANTS_KEY, self._api.producer("restaurants"), self._durations.restaurants
        )

    async def menu(self, restaurant_id: t.Union[str, int]) -> t.Any:
        return await self._cache.get(
            menu_key(restaurant_id),
            self._api.producer(f"restaurants/{restaurant_id}/menu"),
            self._durations.menu_items,
        )

    async def refresh_menu(self, restaurant_id: t.Union[str, int]) -> t.Any:
        return await self._cache.invalidate(
            menu_key(restaurant_id),
            self._api.producer(f"restaurants/{restaurant_id}/menu"),
            self._durations.menu_items,
        )

    async def profile(self) -> t.Any:
        return await self._cache.get(PROFILE_KEY, self._api.producer("users/me"), self._durations.user_profile)

    async def refresh_profile(self) -> t.Any:
        return await self._cache.invalidate(PROFILE_KEY, self._api.producer("users/me"), self._durations.user_profile)

    async def orders(self) -> t.Any:
        return await self._cache.get(ORDERS_KEY, self._api.producer("orders"), self._durations.orders)

    async def refresh_orders(self) -> t.Any:
        return await self._cache.invalidate(ORDERS_KEY, self._api.producer("orders"), self._durations.orders)
