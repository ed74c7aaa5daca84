"""Configuration dataclasses for the HTTP client."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Iterable, Literal, Mapping, Union

from .emulation import EmulationProfile, EmulationSelector, resolve_emulation
from .exceptions import ConfigurationError

HeaderInput = Union[Mapping[str, str], Iterable[tuple[str, str]], None]

DEFAULT_MAX_REDIRECTS = 10

# Engine compression algorithms, in the order they are advertised.
_ENCODINGS = ("gzip", "deflate", "br", "zstd")


def normalize_headers(headers: HeaderInput) -> tuple[tuple[str, str], ...]:
    """Normalize a header mapping or pair sequence to a tuple of pairs.

    Order and duplicate names are preserved.
    """
    if headers is None:
        return ()
    items = headers.items() if isinstance(headers, Mapping) else headers
    result = []
    for item in items:
        try:
            name, value = item
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"invalid header entry: {item!r}") from e
        result.append((str(name), str(value)))
    return tuple(result)


@dataclass(frozen=True)
class Timeout:
    """Timeout settings in seconds. None means unbounded.

    Attributes:
        total: Deadline for the whole call, redirects included.
        connect: Connection establishment timeout.
        read: Maximum time without receiving data.
    """

    total: float | None = None
    connect: float | None = None
    read: float | None = None


@dataclass(frozen=True)
class ProxyConfig:
    """Proxy endpoint and optional credentials."""

    url: str
    username: str | None = None
    password: str | None = None

    @property
    def auth(self) -> tuple[str, str] | None:
        """Username/password pair, if both were supplied."""
        if self.username is not None and self.password is not None:
            return (self.username, self.password)
        return None


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for Client.

    Attributes:
        headers: Default headers sent with every request. Accepts a mapping
            or a sequence of (name, value) pairs; duplicates are preserved.
        user_agent: Explicit User-Agent. Overrides the emulation profile's.
        timeout: Total request timeout in seconds.
        connect_timeout: Connection establishment timeout in seconds.
        read_timeout: Idle read timeout in seconds.
        redirect: True to follow up to 10 redirects, False to disable, or
            the maximum number of redirects to follow.
        cookie_store: Whether to persist cookies across requests.
        proxy: Proxy URL (e.g., "http://host:8080", "socks5://host:1080").
        proxy_user: Proxy username. Requires proxy_pass.
        proxy_pass: Proxy password. Requires proxy_user.
        no_proxy: Disable all proxies, including environment ones.
        https_only: Refuse plain http URLs.
        verify_host: Verify certificate hostname.
        verify_cert: Verify certificate chain.
        http1_only: Restrict to HTTP/1.1.
        http2_only: Restrict to HTTP/2.
        gzip: Accept gzip responses.
        brotli: Accept brotli responses.
        deflate: Accept deflate responses.
        zstd: Accept zstd responses.
        emulation: Browser emulation selector. None uses the default
            profile, False disables emulation.
    """

    headers: HeaderInput = ()
    user_agent: str | None = None

    # Timeouts
    timeout: float | None = None
    connect_timeout: float | None = None
    read_timeout: float | None = None

    # Redirects
    redirect: int | bool = DEFAULT_MAX_REDIRECTS

    # Session behavior
    cookie_store: bool = False

    # Proxy configuration
    proxy: str | None = None
    proxy_user: str | None = None
    proxy_pass: str | None = None
    no_proxy: bool = False

    # TLS
    https_only: bool = False
    verify_host: bool = True
    verify_cert: bool = True

    # Protocol
    http1_only: bool = False
    http2_only: bool = False

    # Compression
    gzip: bool = True
    brotli: bool = True
    deflate: bool = True
    zstd: bool = True

    # Fingerprinting
    emulation: EmulationSelector = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        object.__setattr__(self, "headers", normalize_headers(self.headers))

        if self.http1_only and self.http2_only:
            raise ConfigurationError("http1_only and http2_only are mutually exclusive")
        for name in ("timeout", "connect_timeout", "read_timeout"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ConfigurationError(f"{name} must be > 0")
        if not isinstance(self.redirect, bool) and self.redirect < 0:
            raise ConfigurationError("redirect must be >= 0")
        if (self.proxy_user is None) != (self.proxy_pass is None):
            raise ConfigurationError("proxy_user and proxy_pass must be given together")
        if self.proxy_user is not None and self.proxy is None:
            raise ConfigurationError("proxy_user/proxy_pass require proxy")

        # Unknown profile names fail at construction, not on first request.
        resolve_emulation(self.emulation)

    @classmethod
    def check_option_names(cls, options: Mapping[str, Any]) -> None:
        """Raise ConfigurationError if any option name is not a config field."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ConfigurationError(f"unknown client option(s): {', '.join(unknown)}")

    @classmethod
    def from_options(cls, **options: Any) -> "ClientConfig":
        """Build a config from keyword options, rejecting unknown names."""
        cls.check_option_names(options)
        return cls(**options)

    @property
    def profile(self) -> EmulationProfile | None:
        """Resolved emulation profile, or None when disabled."""
        return resolve_emulation(self.emulation)

    @property
    def timeouts(self) -> Timeout:
        """Timeout settings as a single value."""
        return Timeout(
            total=self.timeout,
            connect=self.connect_timeout,
            read=self.read_timeout,
        )

    @property
    def redirect_limit(self) -> int | None:
        """Maximum redirects to follow, or None when redirects are disabled."""
        if self.redirect is True:
            return DEFAULT_MAX_REDIRECTS
        if self.redirect is False:
            return None
        return int(self.redirect)

    @property
    def protocol(self) -> Literal["any", "http1", "http2"]:
        """Negotiable HTTP protocol versions."""
        if self.http1_only:
            return "http1"
        if self.http2_only:
            return "http2"
        return "any"

    @property
    def accept_encoding(self) -> str | None:
        """Accept-Encoding restricted to the enabled algorithms.

        None when every algorithm is enabled, leaving the choice to the
        emulation profile or the engine.
        """
        flags = {"gzip": self.gzip, "deflate": self.deflate, "br": self.brotli, "zstd": self.zstd}
        enabled = [name for name in _ENCODINGS if flags[name]]
        if len(enabled) == len(_ENCODINGS):
            return None
        return ", ".join(enabled) if enabled else "identity"

    @property
    def proxy_config(self) -> ProxyConfig | None:
        """Proxy settings, or None when no proxy is used."""
        if self.no_proxy or self.proxy is None:
            return None
        return ProxyConfig(self.proxy, self.proxy_user, self.proxy_pass)
