"""ItWhip Instant Ride SDK client.

Entry point for hotel integrations. Wires the configuration, transport,
dispatcher and authorization gate together and exposes the API
namespaces:

    async with InstantRideClient(api_key="...", hotel_id="HOTEL123") as client:
        status = await client.test_connection()
        revenue = await client.analytics.get_revenue()
"""

import asyncio
import random
from enum import Enum
from typing import Any

import httpx

from itwhip.config.settings import Settings, get_settings
from itwhip.core.authorization import AuthorizationGate
from itwhip.core.dispatcher import RequestDispatcher
from itwhip.core.errors import PORTAL_URL, ItWhipError, MissingCredentialError
from itwhip.core.models import SDK_VERSION, AuthorizationState, ClientConfig, ResponseEnvelope
from itwhip.logging.sdk_log import get_sdk_logger
from itwhip.namespaces.analytics import AnalyticsNamespace
from itwhip.namespaces.base import as_dict
from itwhip.namespaces.flights import FlightsNamespace
from itwhip.namespaces.hotels import HotelsNamespace
from itwhip.namespaces.rides import RidesNamespace
from itwhip.transport.resolver import resolve_transport

DEFAULT_API_VERSION = "3.2.1"


class ConnectionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    PROBING = "probing"
    CONNECTED = "connected"
    DEGRADED = "degraded"


class InstantRideClient:
    """Async client for the ItWhip Instant Ride API.

    Args:
        api_key: ItWhip API key. Falls back to ITWHIP_API_KEY. Required.
        hotel_id: Property identifier. Falls back to ITWHIP_HOTEL_ID.
        environment: "production", "staging" or "development".
        base_url: API root, defaults to the v3 API.
        timeout_ms: Per-call timeout in milliseconds.
        http_client: Caller-owned httpx.AsyncClient to send through.
        transport: httpx transport to build the client on (stubs, ASGI apps).
        offline: Skip the network entirely; every call gets a fallback response.
        warm_up: Start the background connectivity check if an event loop is running.
        settings: Settings instance, defaults to get_settings().
        rng: Random source for rides.estimate, seed it for repeatable fares.

    Raises:
        MissingCredentialError: if no API key is configured.
    """

    def __init__(
        self,
        api_key: str | None = None,
        hotel_id: str | None = None,
        environment: str | None = None,
        base_url: str | None = None,
        timeout_ms: int | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        offline: bool | None = None,
        warm_up: bool = False,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ):
        settings = settings or get_settings()
        logger = get_sdk_logger()
        logger.info("ItWhip SDK initializing", extra={"sdk_data": {"sdk_version": SDK_VERSION}})

        try:
            self.config = ClientConfig(
                api_key=api_key if api_key is not None else settings.api_key,
                hotel_id=hotel_id if hotel_id is not None else settings.hotel_id,
                environment=environment or settings.environment,
                base_url=base_url or settings.base_url,
                timeout_ms=timeout_ms if timeout_ms is not None else settings.timeout_ms,
            )
        except MissingCredentialError:
            logger.error("Missing API key", extra={"sdk_data": {"portal_url": PORTAL_URL}})
            raise

        self._transport = resolve_transport(
            client=http_client,
            transport=transport,
            offline=settings.offline if offline is None else offline,
        )
        self._dispatcher = RequestDispatcher(self.config, self._transport)
        self._gate = AuthorizationGate(self._dispatcher)

        self.rides = RidesNamespace(self._dispatcher, self._gate, rng=rng)
        self.analytics = AnalyticsNamespace(self._dispatcher)
        self.hotels = HotelsNamespace(self._dispatcher)
        self.flights = FlightsNamespace(self._dispatcher)

        self._connection_state = ConnectionState.UNINITIALIZED
        self._warm_up_task: asyncio.Task | None = None

        logger.info(
            "ItWhip SDK ready",
            extra={"sdk_data": {
                "hotel_id": self.config.hotel_id,
                "environment": self.config.environment,
                "transport": self._transport.source,
            }},
        )

        if warm_up:
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                logger.debug("No running event loop, skipping connectivity check")
            else:
                self.start_warm_up()

    @property
    def version(self) -> str:
        return SDK_VERSION

    @property
    def connection_state(self) -> ConnectionState:
        return self._connection_state

    # --- Core ---

    async def dispatch(self, target: str, method: str = "GET", **options: Any) -> ResponseEnvelope:
        """Send a raw request through the dispatcher."""
        return await self._dispatcher.dispatch(target, method=method, **options)

    async def check_authorization(self) -> AuthorizationState:
        return await self._gate.check_authorization()

    async def is_activated(self) -> bool:
        return await self._gate.is_authorized()

    # --- Connectivity ---

    def start_warm_up(self) -> asyncio.Task:
        """Spawn the connectivity check. Must be called inside a running loop.

        The returned task resolves to the final ConnectionState. Calls made
        before it finishes do not wait for it.
        """
        if self._warm_up_task is None:
            self._warm_up_task = asyncio.create_task(self._warm_up())
        return self._warm_up_task

    async def _warm_up(self) -> ConnectionState:
        logger = get_sdk_logger()
        self._connection_state = ConnectionState.PROBING
        try:
            result = await self.test_connection()
        except Exception as e:
            logger.warning("Connection test failed", extra={"sdk_data": {"reason": str(e)}})
            self._connection_state = ConnectionState.DEGRADED
            return self._connection_state

        if result.get("status") == "connected":
            self._connection_state = ConnectionState.CONNECTED
            logger.info(
                "Connected to ItWhip network",
                extra={"sdk_data": {
                    "latency": result.get("latency"),
                    "active_properties": result.get("activeProperties"),
                    "active_drivers": result.get("activeDrivers"),
                }},
            )
        else:
            self._connection_state = ConnectionState.DEGRADED
            logger.warning(
                "ItWhip network unreachable, running in degraded mode",
                extra={"sdk_data": {"status": result.get("status"), "reason": result.get("message")}},
            )
        return self._connection_state

    async def test_connection(self) -> dict:
        try:
            envelope = await self._dispatcher.dispatch("/ping")
        except ItWhipError as e:
            return {"status": "error", "message": e.message, "cached": True}

        result = as_dict(envelope.data)
        if envelope.cached:
            return {
                "status": "degraded",
                "message": "ItWhip API unreachable, using cached response",
                "cached": True,
                "timestamp": result.get("timestamp"),
            }

        return {
            **result,
            "status": "connected",
            "latency": f"{round(envelope.latency_ms or 0)}ms",
            "sdk_version": SDK_VERSION,
            "api_version": result.get("version") or DEFAULT_API_VERSION,
            "timestamp": result.get("timestamp"),
        }

    async def get_status(self) -> dict:
        try:
            envelope = await self._dispatcher.dispatch("/status")
        except ItWhipError as e:
            return {"status": "unknown", "error": e.message}
        return envelope.data

    async def validate_auth(self) -> dict:
        """Raw /auth/validate response; failures become {"valid": False}."""
        state = await self._gate.check_authorization()
        return state.raw_details

    async def check_version(self) -> dict:
        try:
            envelope = await self._dispatcher.dispatch("/version")
        except ItWhipError as e:
            return {"compatible": True, "error": e.message}

        compatibility = as_dict(as_dict(envelope.data).get("client")).get("compatibility")
        if isinstance(compatibility, dict) and compatibility:
            return compatibility
        return {"compatible": True, "current_version": SDK_VERSION}

    # --- Lifecycle ---

    async def close(self) -> None:
        if self._warm_up_task is not None and not self._warm_up_task.done():
            self._warm_up_task.cancel()
        client = self._transport.client
        if self._transport.owned and client is not None and not client.is_closed:
            await client.aclose()

    async def __aenter__(self) -> "InstantRideClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
