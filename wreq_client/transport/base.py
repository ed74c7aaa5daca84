"""Abstract transport protocol for HTTP requests."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable

from .._cookies import CookieStore
from ..config import ClientConfig
from ..models import TransportRequest, TransportResponse


@runtime_checkable
class Transport(Protocol):
    """Protocol defining the transport interface.

    Transports perform the network exchange for one request. They are
    driven from a single event loop thread owned by the executor.

    ``cookies`` is the client cookie jar, or None when cookies are not
    persisted. The executor only touches it from the loop thread.
    """

    cookies: CookieStore | None

    async def connect(self, request: TransportRequest) -> TransportResponse:
        """Execute an HTTP request.

        Args:
            request: The fully built request.

        Returns:
            Raw transport response.

        Raises:
            TransportError: On connection or transport errors.
            InvalidURL: If the engine rejects the URL.
        """
        ...

    async def close(self) -> None:
        """Release pooled connections."""
        ...


class BaseTransport(ABC):
    """Abstract base class for transport implementations.

    Holds the client configuration, the cookie jar and the closed flag.
    """

    def __init__(self, config: ClientConfig | None = None):
        """Initialize transport.

        Args:
            config: Client configuration for session-level settings.
        """
        self._config = config or ClientConfig()
        self.cookies: CookieStore | None = CookieStore() if self._config.cookie_store else None
        self._closed = False

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def is_closed(self) -> bool:
        """Check if transport has been closed."""
        return self._closed

    @abstractmethod
    async def connect(self, request: TransportRequest) -> TransportResponse:
        """Execute an HTTP request."""
        raise NotImplementedError

    async def close(self) -> None:
        """Close pooled resources."""
        self._closed = True

    async def __aenter__(self) -> "BaseTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
