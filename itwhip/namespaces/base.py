"""Base for API namespaces bound to a shared dispatcher."""

from urllib.parse import urlencode

from itwhip.core.dispatcher import RequestDispatcher


class Namespace:
    """A group of facade methods sharing one dispatcher."""

    def __init__(self, dispatcher: RequestDispatcher):
        self._dispatcher = dispatcher


def with_query(path: str, params: dict) -> str:
    """Append query params to a path, dropping None values."""
    query = urlencode({k: v for k, v in params.items() if v is not None})
    return f"{path}?{query}" if query else path


def as_dict(value) -> dict:
    """Nested response sections are only read when they are objects."""
    return value if isinstance(value, dict) else {}
