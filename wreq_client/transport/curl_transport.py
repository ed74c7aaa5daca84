"""curl_cffi transport implementation with TLS fingerprinting support."""

from __future__ import annotations

import logging
import math
import time
from typing import Any

from curl_cffi import CurlECode, CurlError, CurlHttpVersion, CurlOpt
from curl_cffi.requests import AsyncSession

from .._debug import describe_request, describe_response
from ..config import ClientConfig
from ..exceptions import InvalidURL, TransportError, TransportErrorKind
from ..models import TransportRequest, TransportResponse
from .base import BaseTransport

logger = logging.getLogger(__name__)

DEFAULT_MAX_CLIENTS = 64

_HTTP_VERSIONS = {
    "http1": CurlHttpVersion.V1_1,
    "http2": CurlHttpVersion.V2_PRIOR_KNOWLEDGE,
}

_VERSION_NAMES = {
    int(CurlHttpVersion.V1_0): "HTTP/1.0",
    int(CurlHttpVersion.V1_1): "HTTP/1.1",
    int(CurlHttpVersion.V2_0): "HTTP/2",
    int(CurlHttpVersion.V2TLS): "HTTP/2",
    int(CurlHttpVersion.V2_PRIOR_KNOWLEDGE): "HTTP/2",
    int(CurlHttpVersion.V3): "HTTP/3",
}

_CONNECTION_REFUSED = {
    CurlECode.COULDNT_CONNECT,
    CurlECode.COULDNT_RESOLVE_HOST,
    CurlECode.COULDNT_RESOLVE_PROXY,
}

_TLS_FAILURES = {
    CurlECode.SSL_CONNECT_ERROR,
    CurlECode.PEER_FAILED_VERIFICATION,
    CurlECode.SSL_CERTPROBLEM,
    CurlECode.SSL_CIPHER,
    CurlECode.SSL_CACERT_BADFILE,
    CurlECode.SSL_ISSUER_ERROR,
}

_INVALID_URL = {
    CurlECode.URL_MALFORMAT,
    CurlECode.UNSUPPORTED_PROTOCOL,
}


def classify_error(error: CurlError) -> TransportErrorKind:
    """Map a curl error to a transport error kind."""
    code = getattr(error, "code", None)
    message = str(error)

    if code == CurlECode.OPERATION_TIMEDOUT:
        if "Connection timed out" in message or "Resolving timed out" in message:
            return TransportErrorKind.CONNECT_TIMEOUT
        if "too slow" in message:
            return TransportErrorKind.READ_TIMEOUT
        return TransportErrorKind.TOTAL_TIMEOUT
    if code in _CONNECTION_REFUSED:
        return TransportErrorKind.CONNECTION_REFUSED
    if code in _TLS_FAILURES:
        return TransportErrorKind.TLS_HANDSHAKE_FAILURE
    if code == CurlECode.TOO_MANY_REDIRECTS:
        return TransportErrorKind.TOO_MANY_REDIRECTS
    if code == CurlECode.BAD_CONTENT_ENCODING:
        return TransportErrorKind.DECODE_ERROR
    return TransportErrorKind.CONNECTION_ERROR


class CurlTransport(BaseTransport):
    """Transport using curl_cffi for TLS fingerprinting.

    One AsyncSession is the connection pool for the owning client. It is
    created lazily on the executor's loop thread and only used from there.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        max_clients: int = DEFAULT_MAX_CLIENTS,
    ):
        """Initialize curl transport.

        Args:
            config: Client configuration for session-level settings.
            max_clients: Maximum concurrent transfers in the pool.
        """
        super().__init__(config)
        self._max_clients = max_clients
        self._session: AsyncSession | None = None

    def _session_options(self) -> dict[Any, Any]:
        """Build curl options applied to every transfer in the pool."""
        config = self._config
        options: dict[Any, Any] = {}

        if config.connect_timeout is not None:
            options[CurlOpt.CONNECTTIMEOUT_MS] = int(config.connect_timeout * 1000)

        # Read timeout: abort when less than 1 byte/s arrives for read_timeout.
        if config.read_timeout is not None:
            options[CurlOpt.LOW_SPEED_LIMIT] = 1
            options[CurlOpt.LOW_SPEED_TIME] = max(1, math.ceil(config.read_timeout))

        if not config.verify_host:
            options[CurlOpt.SSL_VERIFYHOST] = 0

        if config.https_only:
            options[CurlOpt.PROTOCOLS_STR] = b"https"
            options[CurlOpt.REDIR_PROTOCOLS_STR] = b"https"

        return options

    def _get_session(self) -> AsyncSession:
        """Get or create the pooled session.

        With cookie persistence on, the session jar becomes the client jar:
        curl records every redirect hop's Set-Cookie into it and applies
        Domain, Path and expiry. Otherwise the session discards cookies
        after each call.
        """
        if self._session is None:
            session = AsyncSession(
                max_clients=self._max_clients,
                trust_env=not self._config.no_proxy,
                curl_options=self._session_options(),
                discard_cookies=self.cookies is None,
            )
            if self.cookies is not None:
                self.cookies.bind(session.cookies.jar)
            self._session = session
        return self._session

    def _build_request_kwargs(self, request: TransportRequest) -> dict[str, Any]:
        """Build kwargs for curl_cffi."""
        kwargs: dict[str, Any] = {
            "method": request.method,
            "url": request.url,
            "headers": list(request.headers),
            "timeout": request.timeout.total,
            "verify": request.verify_cert,
            "allow_redirects": request.redirect_limit is not None,
            "max_redirects": request.redirect_limit or 0,
            # Profile defaults are already applied and ordered by the builder.
            "default_headers": False,
        }

        if request.body is not None:
            kwargs["data"] = request.body

        if request.impersonate:
            kwargs["impersonate"] = request.impersonate

        if request.proxy is not None:
            kwargs["proxy"] = request.proxy.url
            if request.proxy.auth is not None:
                kwargs["proxy_auth"] = request.proxy.auth

        if request.accept_encoding:
            kwargs["accept_encoding"] = request.accept_encoding

        http_version = _HTTP_VERSIONS.get(request.protocol)
        if http_version is not None:
            kwargs["http_version"] = http_version

        return kwargs

    def _convert_response(self, raw: Any, elapsed: float) -> TransportResponse:
        """Convert a curl_cffi response to a TransportResponse."""
        content = raw.content
        transfer_size = getattr(raw, "download_size", None)
        if transfer_size is None:
            transfer_size = len(content)

        return TransportResponse(
            status=raw.status_code,
            headers=list(raw.headers.multi_items()),
            body=content,
            url=str(raw.url),
            version=_VERSION_NAMES.get(int(raw.http_version or 0), "HTTP/1.1"),
            transfer_size=int(transfer_size),
            elapsed=elapsed,
            redirect_count=getattr(raw, "redirect_count", 0) or 0,
        )

    async def connect(self, request: TransportRequest) -> TransportResponse:
        """Execute an HTTP request.

        Args:
            request: The request to execute.

        Returns:
            TransportResponse with the raw result.

        Raises:
            TransportError: On connection or transport errors.
            InvalidURL: If curl rejects the URL.
        """
        if self._closed:
            raise TransportError(
                TransportErrorKind.CONNECTION_ERROR, "transport is closed", url=request.url
            )

        session = self._get_session()
        kwargs = self._build_request_kwargs(request)
        logger.debug("dispatch %s", describe_request(request))

        start_time = time.monotonic()
        try:
            raw = await session.request(**kwargs)
            response = self._convert_response(raw, time.monotonic() - start_time)
        except CurlError as e:
            if getattr(e, "code", None) in _INVALID_URL:
                raise InvalidURL(request.url, str(e)) from e
            kind = classify_error(e)
            logger.debug("%s %s failed: %s", request.method, request.url, kind.value)
            raise TransportError(kind, str(e), url=request.url, original_error=e) from e
        finally:
            if self.cookies is not None:
                self.cookies.clear_expired()

        logger.debug("complete %s", describe_response(request, response))
        return response

    async def close(self) -> None:
        """Close the pooled session."""
        if self._session is not None:
            await self._session.close()
            self._session = None
        await super().close()
