"""Error kinds raised by the SDK and how the dispatcher routes each one.

Every SDK failure is an ItWhipError subclass tagged with an ErrorKind.
The dispatcher never inspects error text: it looks the kind up in
ROUTING to decide between raising to the caller and substituting a
fallback response.
"""

from enum import Enum

PORTAL_URL = "https://portal.itwhip.com"


class ErrorKind(str, Enum):
    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    TIMEOUT = "TIMEOUT"
    API_ERROR = "API_ERROR"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    TRANSPORT_UNAVAILABLE = "TRANSPORT_UNAVAILABLE"
    PROPERTY_NOT_ACTIVATED = "PROPERTY_NOT_ACTIVATED"


class Route(str, Enum):
    PROPAGATE = "propagate"
    FALLBACK = "fallback"


ROUTING: dict[ErrorKind, Route] = {
    ErrorKind.MISSING_CREDENTIAL: Route.PROPAGATE,
    ErrorKind.TIMEOUT: Route.PROPAGATE,
    ErrorKind.API_ERROR: Route.PROPAGATE,
    ErrorKind.MALFORMED_RESPONSE: Route.PROPAGATE,
    ErrorKind.TRANSPORT_UNAVAILABLE: Route.FALLBACK,
    ErrorKind.PROPERTY_NOT_ACTIVATED: Route.PROPAGATE,
}


class ItWhipError(Exception):
    """Base class for all SDK errors."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def route(self) -> Route:
        return ROUTING[self.kind]


class MissingCredentialError(ItWhipError):
    kind = ErrorKind.MISSING_CREDENTIAL

    def __init__(self, message: str = f"API Key required. Visit {PORTAL_URL} to verify your property."):
        super().__init__(message)


class DispatchTimeoutError(ItWhipError):
    kind = ErrorKind.TIMEOUT

    def __init__(self, timeout_ms: int):
        super().__init__(f"Request timeout after {timeout_ms}ms")
        self.timeout_ms = timeout_ms


class ApiError(ItWhipError):
    kind = ErrorKind.API_ERROR

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(ItWhipError):
    kind = ErrorKind.MALFORMED_RESPONSE

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TransportUnavailableError(ItWhipError):
    kind = ErrorKind.TRANSPORT_UNAVAILABLE


class PropertyNotActivatedError(ItWhipError):
    """Raised when a privileged operation is attempted by an unverified property.

    Carries a remediation hint so callers can show the activation path
    instead of a bare failure.
    """

    kind = ErrorKind.PROPERTY_NOT_ACTIVATED
    error_code = "PROPERTY_NOT_ACTIVATED"

    def __init__(
        self,
        message: str = "Property must be verified and activated.",
        solution: str = f"Visit {PORTAL_URL} to activate instant rides",
        potential_revenue: str = "$67,433/month",
    ):
        super().__init__(message)
        self.solution = solution
        self.potential_revenue = potential_revenue

    def to_dict(self) -> dict:
        return {
            "error": self.error_code,
            "message": self.message,
            "solution": self.solution,
            "potential_revenue": self.potential_revenue,
        }
