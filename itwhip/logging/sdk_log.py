"""JSON-lines logging for the ItWhip SDK.

The SDK only emits records on the ``itwhip.sdk`` logger; applications
opt in to output with setup_logging(). Structured fields travel in
``extra={"sdk_data": {...}}`` and are scrubbed of credentials before
they are serialized, so an API key never reaches a log sink.
"""

import json
import logging
import sys
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

from itwhip.config.settings import get_settings

LOGGER_NAME = "itwhip.sdk"
REDACTED = "***"

# Compared lowercased, with "-" folded to "_"
CREDENTIAL_KEYS = frozenset({"api_key", "x_api_key", "authorization", "credential", "token", "secret"})

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def redact(value: Any) -> Any:
    """Return a copy of value with credential-bearing entries masked.

    Walks nested dicts and lists, so header mappings and request bodies
    embedded in log data are covered too.
    """
    if isinstance(value, dict):
        return {
            key: REDACTED if _is_credential_key(key) else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    return value


def _is_credential_key(key: Any) -> bool:
    return isinstance(key, str) and key.lower().replace("-", "_") in CREDENTIAL_KEYS


class JSONFormatter(logging.Formatter):
    """One JSON object per record, sdk_data merged in after redaction."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": request_id_var.get(""),
        }
        sdk_data = getattr(record, "sdk_data", None)
        if isinstance(sdk_data, dict):
            log_entry.update(redact(sdk_data))
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging(level: str | None = None, log_file: str | None = None) -> logging.Logger:
    """Attach JSON handlers to the SDK logger.

    Arguments override ITWHIP_LOG_LEVEL / ITWHIP_LOG_FILE. Calling it
    again replaces the previous handlers.
    """
    settings = get_settings()
    level = level or settings.log_level
    log_file = settings.log_file if log_file is None else log_file

    logger = get_sdk_logger()
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_sdk_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def generate_request_id() -> str:
    return uuid.uuid4().hex[:12]


class DispatchContext:
    """Request id and clock for a single dispatch."""

    def __init__(self, request_id: str):
        self.request_id = request_id
        self._started = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        return round((time.perf_counter() - self._started) * 1000, 2)


@contextmanager
def dispatch_context() -> Iterator[DispatchContext]:
    """Bind a fresh request id for the duration of one dispatch.

    The previous id is restored on exit, so callers awaiting the
    dispatcher directly do not inherit it.
    """
    context = DispatchContext(generate_request_id())
    token = request_id_var.set(context.request_id)
    try:
        yield context
    finally:
        request_id_var.reset(token)
