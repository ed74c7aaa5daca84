"""Exception hierarchy for the wreq client."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .models import Response


class HTTPClientError(Exception):
    """Base exception for HTTP client errors."""

    pass


class ConfigurationError(HTTPClientError, ValueError):
    """Invalid client or request options.

    Raised synchronously, before any I/O happens.
    """

    pass


class UnknownProfile(ConfigurationError):
    """Emulation selector does not name a known browser profile."""

    def __init__(self, name: object, available: Sequence[str] = ()):
        message = (
            f"unknown emulation: {name!r}. "
            "Use names like 'chrome_143', 'firefox_146', 'safari_18_5', etc."
        )
        super().__init__(message)
        self.name = name
        self.available = list(available)


class ConflictingBody(ConfigurationError):
    """More than one of body, json and form was supplied."""

    def __init__(self, fields: Sequence[str]):
        super().__init__(
            f"only one of body, json, form may be given (got {', '.join(fields)})"
        )
        self.fields = tuple(fields)


class ConflictingAuth(ConfigurationError):
    """More than one of auth, bearer and basic was supplied."""

    def __init__(self, fields: Sequence[str]):
        super().__init__(
            f"only one of auth, bearer, basic may be given (got {', '.join(fields)})"
        )
        self.fields = tuple(fields)


class InvalidURL(ConfigurationError):
    """URL cannot be parsed or uses an unsupported scheme."""

    def __init__(self, url: str, reason: str = "invalid URL"):
        super().__init__(f"{reason}: {url!r}")
        self.url = url
        self.reason = reason


class TransportErrorKind(str, Enum):
    """Classification of failures reported by the transport."""

    CONNECT_TIMEOUT = "connect-timeout"
    READ_TIMEOUT = "read-timeout"
    TOTAL_TIMEOUT = "total-timeout"
    CONNECTION_REFUSED = "connection-refused"
    TLS_HANDSHAKE_FAILURE = "tls-handshake-failure"
    TOO_MANY_REDIRECTS = "too-many-redirects"
    CANCELLED = "cancelled"
    DECODE_ERROR = "decode-error"
    CONNECTION_ERROR = "connection-error"


_TIMEOUT_KINDS = frozenset(
    {
        TransportErrorKind.CONNECT_TIMEOUT,
        TransportErrorKind.READ_TIMEOUT,
        TransportErrorKind.TOTAL_TIMEOUT,
    }
)


class TransportError(HTTPClientError):
    """Error during HTTP transport (connection, timeout, cancellation, etc.)."""

    def __init__(
        self,
        kind: TransportErrorKind,
        message: str,
        url: str | None = None,
        original_error: BaseException | None = None,
    ):
        super().__init__(f"[{kind.value}] {message}")
        self.kind = kind
        self.url = url
        self.original_error = original_error

    @property
    def is_timeout(self) -> bool:
        """Whether this failure was any kind of timeout."""
        return self.kind in _TIMEOUT_KINDS


class ClientClosedError(HTTPClientError):
    """Request issued on a client that has been closed."""

    def __init__(self, message: str = "client is closed"):
        super().__init__(message)


class DecodeError(HTTPClientError):
    """Response body could not be decoded."""

    pass


class EncodingError(DecodeError):
    """Response body is not valid UTF-8."""

    pass


class ParseError(DecodeError):
    """Response body is not valid JSON."""

    pass


class HTTPError(HTTPClientError):
    """HTTP error response (4xx, 5xx status codes)."""

    def __init__(self, message: str, response: Response | None = None):
        super().__init__(message)
        self.response = response
