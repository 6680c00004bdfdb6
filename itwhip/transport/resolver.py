"""Transport resolution: pick the httpx client the dispatcher sends through."""

from dataclasses import dataclass

import httpx

from itwhip.logging.sdk_log import get_sdk_logger


@dataclass
class ResolvedTransport:
    client: httpx.AsyncClient | None  # None = unavailable, every call falls back
    source: str  # "client" | "transport" | "default" | "unavailable"
    owned: bool  # True if the SDK created the client and must close it

    @property
    def available(self) -> bool:
        return self.client is not None


def resolve_transport(
    client: httpx.AsyncClient | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    offline: bool = False,
) -> ResolvedTransport:
    """Resolve the HTTP transport once, at client construction.

    Preference: caller's AsyncClient, then caller's transport wrapped in
    a new AsyncClient, then a default AsyncClient. offline=True skips the
    default and reports the transport as unavailable. Never raises.

    Clients built here have no httpx timeout; the dispatcher enforces
    the configured timeout around each call.
    """
    logger = get_sdk_logger()

    if client is not None:
        return ResolvedTransport(client=client, source="client", owned=False)

    if transport is not None:
        return ResolvedTransport(
            client=httpx.AsyncClient(transport=transport, timeout=None),
            source="transport",
            owned=True,
        )

    if offline:
        logger.warning("HTTP transport unavailable, using fallback responses")
        return ResolvedTransport(client=None, source="unavailable", owned=False)

    return ResolvedTransport(
        client=httpx.AsyncClient(timeout=None),
        source="default",
        owned=True,
    )
