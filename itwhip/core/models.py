"""Data model shared by the dispatcher, the authorization gate and the facades."""

from dataclasses import dataclass, field
from typing import Any

from itwhip.core.errors import MissingCredentialError

SDK_VERSION = "3.3.2"
ENVIRONMENTS = ("production", "staging", "development")
HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


@dataclass(frozen=True)
class ClientConfig:
    api_key: str
    hotel_id: str = ""
    environment: str = "production"  # "production" | "staging" | "development"
    base_url: str = "https://itwhip.com/api/v3"
    timeout_ms: int = 30000

    def __post_init__(self):
        if not self.api_key:
            raise MissingCredentialError()
        if self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {self.timeout_ms}")
        if self.environment not in ENVIRONMENTS:
            raise ValueError(f"Unknown environment: {self.environment}")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


@dataclass
class RequestSpec:
    target: str  # absolute URL or path under base_url
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    params: dict[str, Any] | None = None

    def __post_init__(self):
        self.method = self.method.upper()
        if self.method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")


@dataclass
class ResponseEnvelope:
    ok: bool
    data: Any
    error_code: str | None = None
    error_message: str | None = None
    cached: bool = False  # only set by the fallback generator
    status_code: int | None = None
    latency_ms: float | None = None


@dataclass
class AuthorizationState:
    valid: bool
    account_type: str | None = None
    raw_details: Any = None
