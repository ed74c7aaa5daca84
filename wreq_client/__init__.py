"""HTTP client with browser TLS/HTTP2 fingerprint emulation.

This package provides a request API over curl_cffi with:

- Browser emulation profiles (TLS handshake, HTTP/2 settings, header order)
- Client defaults merged with per-request overrides
- A pooled, concurrent executor that only blocks the calling thread
- Cancellation via CancellationToken, KeyboardInterrupt or task cancel
- Optional per-client cookie persistence

Basic usage:

    import wreq_client

    response = wreq_client.get("https://example.com")
    print(response.status, response.text)

    # Long-lived client
    from wreq_client import Client

    client = Client(emulation="safari_18_5", timeout=30)
    response = client.post("https://example.com/api", json={"key": "value"})
    data = response.json()

    # Emulation disabled, explicit auth
    with Client(emulation=False) as client:
        client.get("https://api.example.com", bearer="token", query={"page": 2})
"""

from ._cookies import CookieStore
from .api import default_client, delete, get, head, options, patch, post, put, request
from .client import Client
from .config import ClientConfig, ProxyConfig, Timeout
from .emulation import (
    DEFAULT_PROFILE,
    PROFILES,
    EmulationProfile,
    get_profile,
    list_profiles,
    resolve_emulation,
)
from .exceptions import (
    ClientClosedError,
    ConfigurationError,
    ConflictingAuth,
    ConflictingBody,
    DecodeError,
    EncodingError,
    HTTPClientError,
    HTTPError,
    InvalidURL,
    ParseError,
    TransportError,
    TransportErrorKind,
    UnknownProfile,
)
from .executor import CancellationToken
from .models import RequestOptions, Response

__version__ = "0.1.0"

__all__ = [
    # Client
    "Client",
    "ClientConfig",
    "ProxyConfig",
    "Timeout",
    "RequestOptions",
    "Response",
    "CancellationToken",
    # Module-level API
    "default_client",
    "request",
    "get",
    "post",
    "put",
    "patch",
    "delete",
    "head",
    "options",
    # Emulation
    "DEFAULT_PROFILE",
    "PROFILES",
    "EmulationProfile",
    "get_profile",
    "list_profiles",
    "resolve_emulation",
    # Cookies
    "CookieStore",
    # Exceptions
    "HTTPClientError",
    "ConfigurationError",
    "UnknownProfile",
    "ConflictingBody",
    "ConflictingAuth",
    "InvalidURL",
    "TransportError",
    "TransportErrorKind",
    "ClientClosedError",
    "DecodeError",
    "EncodingError",
    "ParseError",
    "HTTPError",
]
