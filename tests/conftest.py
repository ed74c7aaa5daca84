"""Shared test fixtures and configuration."""

from __future__ import annotations

import asyncio
import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Generator
from urllib.parse import parse_qsl, urlsplit

import httpx
import pytest

from wreq_client import Client, ClientConfig, CookieStore
from wreq_client.models import TransportRequest, TransportResponse
from wreq_client.transport.base import BaseTransport


class FakeTransport(BaseTransport):
    """In-process transport that records requests instead of using the network.

    Attributes:
        requests: Every request passed to connect(), in arrival order.
        delay: Seconds to sleep before answering.
        error: Exception raised instead of answering.
        cancelled: Number of transfers cancelled while in flight.
        max_concurrent: Highest number of simultaneous transfers seen.
        sent_cookies: Cookies the jar held for each request URL, in arrival order.
    """

    def __init__(
        self,
        status: int = 200,
        body: bytes = b"OK",
        headers: list[tuple[str, str]] | None = None,
        set_cookies: list[tuple[str, str]] | None = None,
        delay: float = 0.0,
        error: BaseException | None = None,
        version: str = "HTTP/2",
        transfer_size: int | None = None,
        final_url: str | None = None,
        config: ClientConfig | None = None,
    ):
        super().__init__(config)
        self.status = status
        self.body = body
        self.headers = headers if headers is not None else [("Content-Type", "text/plain")]
        self.set_cookies = set_cookies or []
        self.delay = delay
        self.error = error
        self.version = version
        self.transfer_size = transfer_size
        self.final_url = final_url
        self.requests: list[TransportRequest] = []
        self.sent_cookies: list[dict[str, str]] = []
        self.cancelled = 0
        self.max_concurrent = 0
        self._active = 0
        self._lock = threading.Lock()

    @property
    def last_request(self) -> TransportRequest:
        return self.requests[-1]

    async def connect(self, request: TransportRequest) -> TransportResponse:
        with self._lock:
            self.requests.append(request)
            if self.cookies is not None:
                self.sent_cookies.append(self.cookies.get_for_url(request.url))
            self._active += 1
            self.max_concurrent = max(self.max_concurrent, self._active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.error is not None:
                raise self.error
            if self.cookies is not None:
                host = httpx.URL(request.url).host
                for name, value in self.set_cookies:
                    self.cookies.set(name, value, domain=host)
            return TransportResponse(
                status=self.status,
                headers=list(self.headers),
                body=self.body,
                url=self.final_url or request.url,
                version=self.version,
                transfer_size=self.transfer_size if self.transfer_size is not None else len(self.body),
                elapsed=self.delay,
            )
        except asyncio.CancelledError:
            with self._lock:
                self.cancelled += 1
            raise
        finally:
            with self._lock:
                self._active -= 1


# ============== Configuration Fixtures ==============

@pytest.fixture
def default_config() -> ClientConfig:
    """Default client configuration."""
    return ClientConfig()


@pytest.fixture
def plain_config() -> ClientConfig:
    """Configuration with emulation disabled."""
    return ClientConfig(emulation=False)


# ============== Transport Fixtures ==============

@pytest.fixture
def fake_transport() -> FakeTransport:
    """Fake transport answering 200 OK immediately."""
    return FakeTransport()


@pytest.fixture
def slow_transport() -> FakeTransport:
    """Fake transport answering after one second."""
    return FakeTransport(delay=1.0)


# ============== Client Fixtures ==============

@pytest.fixture
def client(fake_transport: FakeTransport) -> Generator[Client, None, None]:
    """Client with default configuration and a fake transport."""
    client = Client(transport=fake_transport)
    yield client
    client.close()


@pytest.fixture
def plain_client(fake_transport: FakeTransport) -> Generator[Client, None, None]:
    """Client with emulation disabled."""
    client = Client(emulation=False, transport=fake_transport)
    yield client
    client.close()


@pytest.fixture
def cookie_client() -> Generator[Client, None, None]:
    """Client with a cookie jar and a transport that sets cookies."""
    transport = FakeTransport(
        set_cookies=[("session", "abc123"), ("user", "testuser")],
        config=ClientConfig(cookie_store=True),
    )
    client = Client(cookie_store=True, transport=transport)
    yield client
    client.close()


@pytest.fixture
def cookie_store() -> CookieStore:
    """Empty cookie store."""
    return CookieStore()


@pytest.fixture
def populated_cookie_store() -> CookieStore:
    """Cookie store with test cookies."""
    store = CookieStore()
    store.set("session_id", "abc123", domain="example.com")
    store.set("user_token", "xyz789", domain="example.com", path="/api")
    store.set("other_cookie", "value", domain="other.com")
    return store


@pytest.fixture
def transport_factory() -> type[FakeTransport]:
    """The FakeTransport class, for tests that need custom behavior."""
    return FakeTransport


# ============== Local Server Fixtures ==============

class LocalHandler(BaseHTTPRequestHandler):
    """Routes for exercising the real curl engine on 127.0.0.1.

    /redirect/<n>  302 chain of n hops ending at an echo
    /login         302 to /echo, setting sid=xyz on the redirect hop
    /logout        deletes sid with Max-Age=0
    /echo          JSON description of the request
    """

    protocol_version = "HTTP/1.1"

    def log_message(self, format, *args):
        pass

    def _send(self, status, body=b"", headers=()):
        self.send_response(status)
        for name, value in headers:
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _echo(self, parsed):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        payload = {
            "method": self.command,
            "path": parsed.path,
            "query": parse_qsl(parsed.query, keep_blank_values=True),
            "user_agent": self.headers.get("User-Agent"),
            "content_type": self.headers.get("Content-Type"),
            "cookie": self.headers.get("Cookie"),
            "body": body.decode("utf-8"),
        }
        self._send(
            200,
            json.dumps(payload).encode("utf-8"),
            [("Content-Type", "application/json")],
        )

    def _route(self):
        parsed = urlsplit(self.path)
        if parsed.path.startswith("/redirect/"):
            remaining = int(parsed.path.rsplit("/", 1)[1])
            if remaining > 0:
                self._send(302, headers=[("Location", f"/redirect/{remaining - 1}")])
                return
        elif parsed.path == "/login":
            self._send(302, headers=[("Set-Cookie", "sid=xyz; Path=/"), ("Location", "/echo")])
            return
        elif parsed.path == "/logout":
            self._send(200, headers=[("Set-Cookie", "sid=; Max-Age=0; Path=/")])
            return
        self._echo(parsed)

    do_GET = _route
    do_POST = _route
    do_PUT = _route
    do_PATCH = _route
    do_DELETE = _route


@pytest.fixture(scope="session")
def local_server() -> Generator[str, None, None]:
    """Base URL of a threaded HTTP server bound to 127.0.0.1."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), LocalHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()
