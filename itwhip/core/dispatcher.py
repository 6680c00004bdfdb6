"""Request dispatcher: the single path every API call goes through."""

import asyncio
from typing import Any
from urllib.parse import urlsplit

import httpx

from itwhip.core.errors import (
    ApiError,
    DispatchTimeoutError,
    ItWhipError,
    MalformedResponseError,
    Route,
    TransportUnavailableError,
)
from itwhip.core.fallback import fallback_response
from itwhip.core.models import SDK_VERSION, ClientConfig, RequestSpec, ResponseEnvelope
from itwhip.logging.sdk_log import dispatch_context, get_sdk_logger
from itwhip.transport.resolver import ResolvedTransport


class RequestDispatcher:
    """Sends one request per call with auth headers and a timeout.

    Connectivity failures are answered from the fallback generator.
    Timeouts, error statuses and unparseable bodies are raised.
    """

    def __init__(self, config: ClientConfig, transport: ResolvedTransport):
        self._config = config
        self._transport = transport

    @property
    def config(self) -> ClientConfig:
        return self._config

    def build_url(self, target: str) -> str:
        if urlsplit(target).scheme:
            return target
        return f"{self._config.base_url.rstrip('/')}{target}"

    def build_headers(self, overrides: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "X-API-Key": self._config.api_key,
            "X-SDK-Version": f"itwhip-python/{SDK_VERSION}",
        }
        if overrides:
            headers.update(overrides)
        return headers

    async def dispatch(
        self,
        target: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> ResponseEnvelope:
        spec = RequestSpec(target=target, method=method, headers=headers or {}, body=body, params=params)
        return await self.dispatch_spec(spec)

    async def dispatch_spec(self, spec: RequestSpec) -> ResponseEnvelope:
        logger = get_sdk_logger()
        log_data = {"method": spec.method, "target": spec.target}

        with dispatch_context() as ctx:
            try:
                envelope = await self._execute(spec)
            except ItWhipError as e:
                if e.route is Route.FALLBACK:
                    logger.warning(
                        "API unreachable, serving fallback response",
                        extra={"sdk_data": {**log_data, "error_kind": e.kind.value, "reason": e.message}},
                    )
                    return fallback_response(spec.target)
                logger.warning(
                    "API call failed",
                    extra={"sdk_data": {
                        **log_data,
                        "error_kind": e.kind.value,
                        "reason": e.message,
                        "status_code": getattr(e, "status_code", None),
                        "latency_ms": ctx.elapsed_ms,
                    }},
                )
                raise

            envelope.latency_ms = ctx.elapsed_ms
            logger.info(
                "API call completed",
                extra={"sdk_data": {
                    **log_data,
                    "status_code": envelope.status_code,
                    "latency_ms": envelope.latency_ms,
                    "cached": envelope.cached,
                }},
            )
            return envelope

    async def _execute(self, spec: RequestSpec) -> ResponseEnvelope:
        client = self._transport.client
        if client is None:
            raise TransportUnavailableError("No HTTP transport available")
        if client.is_closed:
            raise TransportUnavailableError("HTTP client has been closed")

        url = self.build_url(spec.target)
        headers = self.build_headers(spec.headers)
        get_sdk_logger().debug(
            "Sending request",
            extra={"sdk_data": {"method": spec.method, "url": url, "headers": headers}},
        )

        try:
            response = await asyncio.wait_for(
                client.request(spec.method, url, headers=headers, json=spec.body, params=spec.params),
                timeout=self._config.timeout_seconds,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            raise DispatchTimeoutError(self._config.timeout_ms)
        except (httpx.NetworkError, httpx.ProxyError) as e:
            raise TransportUnavailableError(f"Cannot reach ItWhip API: {e}") from e
        except httpx.HTTPError as e:
            raise ApiError(f"Upstream error: {e}", status_code=502) from e

        data = _parse_json(response)

        if not response.is_success or _carries_error(data):
            raise ApiError(_error_message(data), status_code=response.status_code)

        return ResponseEnvelope(ok=True, data=data, status_code=response.status_code)


def _parse_json(response: httpx.Response) -> Any:
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError as e:
        raise MalformedResponseError(
            f"Invalid JSON in response: {e}", status_code=response.status_code
        ) from e


def _carries_error(data: Any) -> bool:
    """A 2xx body can still report failure with "success": false."""
    return isinstance(data, dict) and data.get("success") is False


def _error_message(data: Any) -> str:
    if isinstance(data, dict):
        message = data.get("error") or data.get("message")
        if message:
            return str(message)
    return "API request failed"
