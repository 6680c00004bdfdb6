"""Canned responses served when the ItWhip API cannot be reached."""

from datetime import datetime, timezone

from itwhip.core.models import ResponseEnvelope

SERVICE_TEMPORARILY_UNAVAILABLE = "SERVICE_TEMPORARILY_UNAVAILABLE"


def fallback_response(target: str) -> ResponseEnvelope:
    """Build the degraded-mode response for a request target.

    Matching is by substring, /status first, then /ping. Anything else
    gets a generic unavailable payload. Every result is marked cached.
    """
    if "/status" in target:
        return ResponseEnvelope(
            ok=True,
            data={"status": "operational", "message": "Using cached response", "cached": True},
            cached=True,
        )

    if "/ping" in target:
        return ResponseEnvelope(
            ok=True,
            data={
                "pong": True,
                "cached": True,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
            cached=True,
        )

    message = "Please try again later"
    return ResponseEnvelope(
        ok=False,
        data={"error": SERVICE_TEMPORARILY_UNAVAILABLE, "message": message, "cached": True},
        error_code=SERVICE_TEMPORARILY_UNAVAILABLE,
        error_message=message,
        cached=True,
    )
