"""HTTP client with browser emulation and a pooled, cancellable executor."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any

from ._cookies import CookieStore
from .builder import build
from .config import ClientConfig
from .exceptions import ClientClosedError
from .executor import TransportExecutor
from .merge import merge
from .models import RequestOptions, Response, TransportRequest
from .transport import CurlTransport, Transport

logger = logging.getLogger(__name__)


class Client:
    """Long-lived HTTP client.

    Owns one connection pool, one background loop thread and, when
    ``cookie_store=True``, one cookie jar. Safe to share between threads.

    Examples:
        # Default Chrome emulation
        client = Client()
        response = client.get("https://example.com")

        # Firefox, with cookies persisted across calls
        client = Client(emulation="firefox_146", cookie_store=True)
        client.post("https://example.com/login", form={"user": "..."})
        client.get("https://example.com/dashboard")

        # Plain client, no fingerprint shaping
        with Client(emulation=False, timeout=10) as client:
            client.get("https://api.example.com/data", bearer="token")

        # Async usage
        async with Client() as client:
            response = await client.get_async("https://example.com")
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: Transport | None = None,
        **options: Any,
    ):
        """Initialize Client.

        Args:
            config: Client configuration. Keyword options are applied on top.
            transport: Transport override (defaults to CurlTransport).
            **options: ClientConfig fields (headers, timeout, emulation, ...).

        Raises:
            ConfigurationError: On unknown or invalid options.
        """
        if config is None:
            config = ClientConfig.from_options(**options)
        elif options:
            ClientConfig.check_option_names(options)
            # Cross-field validation runs once, on the merged config.
            config = dataclasses.replace(config, **options)

        self._config = config
        self._executor = TransportExecutor(transport or CurlTransport(config))

    @property
    def config(self) -> ClientConfig:
        """Client configuration."""
        return self._config

    @property
    def cookie_store(self) -> CookieStore | None:
        """Cookie jar shared with the transport, or None when cookies are not persisted."""
        return self._executor.transport.cookies

    @property
    def cookies(self) -> dict[str, dict[str, str]]:
        """Snapshot of stored cookies by domain."""
        store = self.cookie_store
        if store is None:
            return {}
        return self._executor.call(store.get_all)

    def clear_cookies(self, domain: str | None = None) -> None:
        """Clear stored cookies.

        Args:
            domain: Only clear this domain. None clears everything.
        """
        store = self.cookie_store
        if store is None:
            return
        if domain is None:
            self._executor.call(store.clear_all)
        else:
            self._executor.call(store.clear_domain, domain)

    @property
    def is_closed(self) -> bool:
        return self._executor.is_closed

    def _prepare(self, method: str, url: str, options: RequestOptions) -> TransportRequest:
        if self._executor.is_closed:
            raise ClientClosedError()

        return build(merge(self._config, options), method, url)

    def request(self, method: str, url: str, **kwargs: Any) -> Response:
        """Execute an HTTP request, blocking the calling thread only.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE, HEAD, OPTIONS).
            url: Absolute http(s) URL.
            **kwargs: RequestOptions fields (headers, json, query, bearer, ...).

        Returns:
            Response object.

        Raises:
            ConfigurationError: On invalid or conflicting options.
            TransportError: On connection failure, timeout, or cancellation.
            ClientClosedError: If the client has been closed.
        """
        options = RequestOptions.from_options(**kwargs)
        request = self._prepare(method, url, options)
        raw = self._executor.execute(request, options.cancel)
        return Response.from_transport(raw)

    def get(self, url: str, **kwargs: Any) -> Response:
        """Send a GET request."""
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> Response:
        """Send a POST request."""
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> Response:
        """Send a PUT request."""
        return self.request("PUT", url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> Response:
        """Send a PATCH request."""
        return self.request("PATCH", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> Response:
        """Send a DELETE request."""
        return self.request("DELETE", url, **kwargs)

    def head(self, url: str, **kwargs: Any) -> Response:
        """Send a HEAD request."""
        return self.request("HEAD", url, **kwargs)

    def options(self, url: str, **kwargs: Any) -> Response:
        """Send an OPTIONS request."""
        return self.request("OPTIONS", url, **kwargs)

    # =========================================================================
    # Async API
    # =========================================================================

    async def request_async(self, method: str, url: str, **kwargs: Any) -> Response:
        """Execute an HTTP request from async code.

        The transfer runs on the client's loop thread. Cancelling the
        awaiting task cancels the transfer.
        """
        options = RequestOptions.from_options(**kwargs)
        request = self._prepare(method, url, options)
        raw = await self._executor.execute_async(request, options.cancel)
        return Response.from_transport(raw)

    async def get_async(self, url: str, **kwargs: Any) -> Response:
        return await self.request_async("GET", url, **kwargs)

    async def post_async(self, url: str, **kwargs: Any) -> Response:
        return await self.request_async("POST", url, **kwargs)

    async def put_async(self, url: str, **kwargs: Any) -> Response:
        return await self.request_async("PUT", url, **kwargs)

    async def patch_async(self, url: str, **kwargs: Any) -> Response:
        return await self.request_async("PATCH", url, **kwargs)

    async def delete_async(self, url: str, **kwargs: Any) -> Response:
        return await self.request_async("DELETE", url, **kwargs)

    async def head_async(self, url: str, **kwargs: Any) -> Response:
        return await self.request_async("HEAD", url, **kwargs)

    async def options_async(self, url: str, **kwargs: Any) -> Response:
        return await self.request_async("OPTIONS", url, **kwargs)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Cancel in-flight requests and release the connection pool."""
        logger.debug("closing client")
        self._executor.close()

    async def close_async(self) -> None:
        """Close without blocking the running event loop."""
        await asyncio.to_thread(self._executor.close)

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close_async()

    def __repr__(self) -> str:
        profile = self._config.profile
        emulation = profile.name if profile else None
        return f"<Client emulation={emulation!r} closed={self.is_closed}>"
