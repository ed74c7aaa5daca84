"""Request and Response dataclasses."""

from __future__ import annotations

import json as json_module
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any, Literal, Mapping, Sequence, Union

import httpx

from .config import HeaderInput, ProxyConfig, Timeout
from .exceptions import ConfigurationError, EncodingError, HTTPError, ParseError

if TYPE_CHECKING:
    from .emulation import EmulationProfile, EmulationSelector
    from .executor import CancellationToken

_UNPARSED = object()

Pairs = Union[Mapping[str, Any], Sequence[tuple[str, Any]]]


@dataclass
class RequestOptions:
    """Per-call options accepted by every request verb.

    Attributes:
        headers: Extra headers. Replace client headers of the same name.
        timeout: Total timeout override in seconds.
        proxy: Proxy URL override.
        emulation: Emulation selector override. False disables emulation.
        body: Raw request body (sent unchanged).
        json: Value serialized as a JSON body.
        form: Fields sent as an urlencoded form body.
        query: Query parameters appended to the URL.
        auth: Raw Authorization header value.
        bearer: Bearer token.
        basic: (username, password) for Basic auth.
        cancel: Token that aborts the call when cancelled.
    """

    headers: HeaderInput = None
    timeout: float | None = None
    proxy: str | None = None
    emulation: EmulationSelector = None
    body: bytes | str | None = None
    json: Any = None
    form: Pairs | None = None
    query: Pairs | None = None
    auth: str | None = None
    bearer: str | None = None
    basic: Sequence[str] | None = None
    cancel: CancellationToken | None = None

    @classmethod
    def from_options(cls, **options: Any) -> "RequestOptions":
        """Build options from keyword arguments, rejecting unknown names."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ConfigurationError(f"unknown request option(s): {', '.join(unknown)}")
        return cls(**options)


@dataclass(frozen=True)
class Body:
    """Request body before serialization.

    Attributes:
        kind: "raw" for bytes/str, "json" for a JSON value, "form" for pairs.
        value: The body payload.
    """

    kind: Literal["raw", "json", "form"]
    value: Any


@dataclass(frozen=True)
class EffectiveRequest:
    """Client config and per-call options reconciled into one request."""

    headers: tuple[tuple[str, str], ...]
    user_agent: str | None
    timeout: Timeout
    proxy: ProxyConfig | None
    emulation: EmulationProfile | None
    body: Body | None = None
    query: tuple[tuple[str, str], ...] = ()
    redirect_limit: int | None = 10
    https_only: bool = False
    verify_cert: bool = True
    protocol: Literal["any", "http1", "http2"] = "any"
    accept_encoding: str | None = None


@dataclass(frozen=True)
class TransportRequest:
    """Fully built request handed to the transport.

    Attributes:
        method: Upper-case HTTP method.
        url: Absolute URL, query included.
        headers: Ordered header pairs.
        body: Serialized body bytes, or None.
        timeout: Timeout settings.
        redirect_limit: Maximum redirects, None when disabled.
        proxy: Proxy settings, or None.
        emulation: Emulation profile, or None when disabled.
        protocol: Negotiable HTTP versions.
        accept_encoding: Restricted Accept-Encoding, or None for default.
        verify_cert: Verify certificate chain.
    """

    method: str
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes | None = None
    timeout: Timeout = field(default_factory=Timeout)
    redirect_limit: int | None = 10
    proxy: ProxyConfig | None = None
    emulation: EmulationProfile | None = None
    protocol: Literal["any", "http1", "http2"] = "any"
    accept_encoding: str | None = None
    verify_cert: bool = True

    @property
    def impersonate(self) -> str | None:
        """Engine impersonation target, or None when emulation is disabled."""
        return self.emulation.impersonate if self.emulation else None


@dataclass
class TransportResponse:
    """Raw engine result as plain data."""

    status: int
    headers: list[tuple[str, str]]
    body: bytes
    url: str
    version: str = "HTTP/1.1"
    transfer_size: int | None = None
    elapsed: float = 0.0
    redirect_count: int = 0


@dataclass(frozen=True)
class Response:
    """HTTP response representation.

    Attributes:
        status_code: HTTP status code.
        headers: Response headers (case-insensitive, duplicates kept).
        content: Decoded response body bytes.
        url: Final URL after redirects.
        version: Negotiated protocol version, e.g. "HTTP/2".
        transfer_size: Bytes received on the wire, before decompression.
            None when the engine cannot report it.
        elapsed: Request duration in seconds.
        redirect_count: Number of redirects followed.
    """

    status_code: int
    headers: httpx.Headers
    content: bytes
    url: str
    version: str = "HTTP/1.1"
    transfer_size: int | None = None
    elapsed: float = 0.0
    redirect_count: int = 0
    _json: Any = field(default=_UNPARSED, init=False, repr=False, compare=False)

    @classmethod
    def from_transport(cls, raw: TransportResponse) -> "Response":
        """Build a response from a transport result."""
        return cls(
            status_code=raw.status,
            headers=httpx.Headers(raw.headers),
            content=raw.body,
            url=raw.url,
            version=raw.version,
            transfer_size=raw.transfer_size,
            elapsed=raw.elapsed,
            redirect_count=raw.redirect_count,
        )

    @property
    def status(self) -> int:
        """Alias for status_code."""
        return self.status_code

    @property
    def code(self) -> int:
        """Alias for status_code."""
        return self.status_code

    @property
    def body_bytes(self) -> bytes:
        """Alias for content."""
        return self.content

    @property
    def content_length(self) -> int:
        """Length of the decoded body in bytes."""
        return len(self.content)

    @property
    def text(self) -> str:
        """Decode content as strict UTF-8.

        Raises:
            EncodingError: If the body is not valid UTF-8.
        """
        try:
            return self.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError(f"response body is not valid UTF-8: {e}") from e

    @property
    def body(self) -> str:
        """Alias for text."""
        return self.text

    def header(self, name: str, default: str | None = None) -> str | None:
        """Get a header value by case-insensitive name.

        Repeated headers are joined with ", ".
        """
        return self.headers.get(name, default)

    @property
    def ok(self) -> bool:
        """Check if status code indicates success (2xx)."""
        return self.is_success

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status_code < 400

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    def json(self) -> Any:
        """Parse content as JSON. The parsed value is cached after the first call.

        Raises:
            ParseError: If the body is not valid JSON.
        """
        if self._json is _UNPARSED:
            try:
                value = json_module.loads(self.content)
            except ValueError as e:
                raise ParseError(f"response body is not valid JSON: {e}") from e
            object.__setattr__(self, "_json", value)
        return self._json

    def raise_for_status(self) -> None:
        """Raise HTTPError if status code indicates an error."""
        if self.status_code >= 400:
            raise HTTPError(
                f"HTTP {self.status_code} for {self.url}",
                response=self,
            )

    def __repr__(self) -> str:
        return f"<Response status={self.status_code} url={self.url!r}>"
