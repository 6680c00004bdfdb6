"""Ride lifecycle: create (privileged), track, estimate."""

import random
from urllib.parse import quote

from itwhip.core.authorization import AuthorizationGate
from itwhip.core.dispatcher import RequestDispatcher
from itwhip.core.errors import ItWhipError
from itwhip.logging.sdk_log import get_sdk_logger
from itwhip.namespaces.base import Namespace

RATE_PER_MILE = 3.5


class RidesNamespace(Namespace):

    def __init__(self, dispatcher: RequestDispatcher, gate: AuthorizationGate, rng: random.Random | None = None):
        super().__init__(dispatcher)
        self._gate = gate
        self._rng = rng or random.Random()

    async def create(self, **options) -> dict:
        """Dispatch a ride for a guest.

        Requires an activated hotel account. Raises
        PropertyNotActivatedError before any ride request is sent otherwise.
        """
        await self._gate.require()

        body = {**options, "hotel_id": self._dispatcher.config.hotel_id}
        envelope = await self._dispatcher.dispatch("/rides", method="POST", body=body)
        if envelope.ok:
            get_sdk_logger().info("Ride created", extra={"sdk_data": {"hotel_id": body["hotel_id"]}})
        return envelope.data

    async def dispatch(self, **options) -> dict:
        return await self.create(**options)

    async def track(self, ride_id: str) -> dict:
        try:
            envelope = await self._dispatcher.dispatch(f"/rides/{quote(str(ride_id), safe='')}")
        except ItWhipError:
            return {
                "error": "RIDE_NOT_FOUND",
                "message": "Invalid ride ID or tracking not available",
            }
        return envelope.data

    async def estimate(self, pickup: str, destination: str) -> dict:
        """Local fare estimate comparing standard and surge pricing."""
        distance = self._rng.randint(5, 24)
        base_fare = distance * RATE_PER_MILE
        surge_fare = base_fare * (1.5 + self._rng.random() * 2)

        return {
            "pickup": pickup,
            "destination": destination,
            "distance": f"{distance} miles",
            "standard_fare": f"${base_fare:.2f}",
            "surge_fare": f"${surge_fare:.2f} ({surge_fare / base_fare:.1f}x surge)",
            "savings": f"${surge_fare - base_fare:.2f}",
            "message": "Activate to lock in no-surge pricing",
        }
