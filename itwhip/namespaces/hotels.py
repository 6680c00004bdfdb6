"""Hotel search, backed by the ItWhip index or live Amadeus GDS data."""

from itwhip.core.errors import ItWhipError
from itwhip.namespaces.base import Namespace, with_query


class HotelsNamespace(Namespace):

    async def search(self, use_amadeus: bool = False, **params) -> dict:
        path = "/amadeus/hotels" if use_amadeus else "/hotels/search"
        try:
            envelope = await self._dispatcher.dispatch(with_query(path, params))
        except ItWhipError as e:
            return {"success": False, "error": e.message, "hotels": []}
        return envelope.data

    async def search_by_city(self, city_code: str = "PHX") -> dict:
        return await self.search(cityCode=city_code)

    async def search_nearby(self, lat: float, lng: float, radius: float = 10) -> dict:
        return await self.search(latitude=lat, longitude=lng, radius=radius)

    async def search_gds(self, **params) -> dict:
        return await self.search(use_amadeus=True, **params)
