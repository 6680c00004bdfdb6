"""Shared fixtures for the ItWhip SDK test suite."""

import os

import httpx
import pytest
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from itwhip.client import InstantRideClient
from itwhip.config.settings import get_settings

BASE_URL = "http://testserver/api/v3"
PING_TIMESTAMP = "2024-06-01T12:00:00Z"


@pytest.fixture(autouse=True)
def isolate_settings(monkeypatch):
    """Keep real ITWHIP_* env vars out of the tests."""
    for key in list(os.environ):
        if key.startswith("ITWHIP_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set ITWHIP_* env vars and clear settings cache.

    Usage:
        override_settings(API_KEY="key1", TIMEOUT_MS="5000")
    """
    def _override(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(f"ITWHIP_{key.upper()}", str(value))
        get_settings.cache_clear()

    yield _override

    get_settings.cache_clear()


def build_stub_api() -> FastAPI:
    """A stand-in for the ItWhip v3 API.

    Behavior is steered through app.state; every request is recorded in
    app.state.calls as (method, path, headers, query).
    """
    app = FastAPI()
    app.state.calls = []
    app.state.auth_status = 200
    app.state.auth = {"valid": True, "accountType": "hotel"}
    app.state.analytics = {
        "revenue": {"total": 12000},
        "rides": {"active": 12, "total": 100},
        "surgeAnalysis": {"currentMarketSurge": 1.8},
    }

    async def record(request: Request):
        request.app.state.calls.append(
            (request.method, request.url.path, dict(request.headers), dict(request.query_params))
        )

    router = APIRouter(prefix="/api/v3", dependencies=[Depends(record)])

    @router.get("/ping")
    async def ping():
        return {
            "version": "3.2.1",
            "timestamp": PING_TIMESTAMP,
            "activeProperties": 487,
            "activeDrivers": 2847,
        }

    @router.get("/status")
    async def status():
        return {"status": "operational", "cached": False}

    @router.post("/auth/validate")
    async def validate(request: Request):
        return JSONResponse(status_code=request.app.state.auth_status, content=request.app.state.auth)

    @router.post("/rides")
    async def create_ride(request: Request):
        body = await request.json()
        return {"rideId": "RIDE_1001", "status": "dispatched", "request": body}

    @router.get("/rides/{ride_id}")
    async def track_ride(ride_id: str):
        if ride_id == "missing":
            return JSONResponse(status_code=404, content={"error": "Ride not found"})
        return {"rideId": ride_id, "status": "en_route", "eta": "4 minutes"}

    @router.get("/analytics/sample")
    async def analytics(request: Request, period: str = "month"):
        return {"period": period, **request.app.state.analytics}

    @router.get("/hotels/search")
    async def hotel_search(request: Request):
        return {"success": True, "source": "itwhip", "query": dict(request.query_params), "hotels": [{"id": "H1"}]}

    @router.get("/amadeus/hotels")
    async def amadeus_search(request: Request):
        return {"success": True, "source": "amadeus", "query": dict(request.query_params), "hotels": [{"id": "A1"}]}

    @router.get("/flights/track/{flight_number}")
    async def track_flight(flight_number: str):
        return {"flightNumber": flight_number, "status": "on_time"}

    @router.get("/version")
    async def version():
        return {"client": {"compatibility": {"compatible": True, "minimumVersion": "3.0.0"}}}

    app.include_router(router)
    return app


@pytest.fixture
def stub_api() -> FastAPI:
    return build_stub_api()


@pytest.fixture
async def api_client(stub_api):
    """SDK client wired to the stub API through an ASGI transport."""
    client = InstantRideClient(
        api_key="test_key",
        hotel_id="TEST001",
        base_url=BASE_URL,
        transport=httpx.ASGITransport(app=stub_api),
    )
    yield client
    await client.close()


@pytest.fixture
def make_client():
    """Factory fixture: SDK client whose requests go to a MockTransport handler."""
    def _make(handler, **kwargs) -> InstantRideClient:
        kwargs.setdefault("api_key", "test_key")
        kwargs.setdefault("hotel_id", "TEST001")
        kwargs.setdefault("base_url", BASE_URL)
        client = InstantRideClient(transport=httpx.MockTransport(handler), **kwargs)
        return client

    return _make


@pytest.fixture
def offline_client() -> InstantRideClient:
    """SDK client with no transport; every call gets a fallback response."""
    return InstantRideClient(api_key="test_key", hotel_id="TEST001", offline=True)
