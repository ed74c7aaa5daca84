"""Module-level request functions backed by a shared default client."""

from __future__ import annotations

import threading
from typing import Any

from .client import Client
from .models import Response

_default_client: Client | None = None
_default_client_lock = threading.Lock()


def default_client() -> Client:
    """Get the process-wide default client, creating it on first use.

    The default client uses default configuration and is never closed
    explicitly; its loop thread is a daemon and ends with the process.
    """
    global _default_client
    if _default_client is None:
        with _default_client_lock:
            if _default_client is None:
                _default_client = Client()
    return _default_client


def request(method: str, url: str, **kwargs: Any) -> Response:
    """Send a request with the default client.

    Args:
        method: HTTP method.
        url: Absolute http(s) URL.
        **kwargs: Per-request options (headers, json, query, timeout, ...).

    Returns:
        Response object.
    """
    return default_client().request(method, url, **kwargs)


def get(url: str, **kwargs: Any) -> Response:
    """Send a GET request with the default client."""
    return request("GET", url, **kwargs)


def post(url: str, **kwargs: Any) -> Response:
    """Send a POST request with the default client."""
    return request("POST", url, **kwargs)


def put(url: str, **kwargs: Any) -> Response:
    """Send a PUT request with the default client."""
    return request("PUT", url, **kwargs)


def patch(url: str, **kwargs: Any) -> Response:
    """Send a PATCH request with the default client."""
    return request("PATCH", url, **kwargs)


def delete(url: str, **kwargs: Any) -> Response:
    """Send a DELETE request with the default client."""
    return request("DELETE", url, **kwargs)


def head(url: str, **kwargs: Any) -> Response:
    """Send a HEAD request with the default client."""
    return request("HEAD", url, **kwargs)


def options(url: str, **kwargs: Any) -> Response:
    """Send an OPTIONS request with the default client."""
    return request("OPTIONS", url, **kwargs)
