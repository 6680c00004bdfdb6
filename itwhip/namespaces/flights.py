"""Guest flight tracking."""

from urllib.parse import quote

from itwhip.core.errors import PORTAL_URL, ItWhipError
from itwhip.namespaces.base import Namespace


class FlightsNamespace(Namespace):

    async def track(self, flight_number: str) -> dict:
        try:
            envelope = await self._dispatcher.dispatch(f"/flights/track/{quote(str(flight_number), safe='')}")
        except ItWhipError:
            return {
                "error": "INTEGRATION_REQUIRED",
                "message": "Flight tracking requires GDS integration",
                "instructions": f"Complete verification at {PORTAL_URL}",
            }
        return envelope.data
