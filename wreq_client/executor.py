"""Run transport requests on a background event loop.

Every client owns one executor. The executor starts a daemon thread running
a private asyncio loop on first use; transfers run there, and calling threads
only wait on a ``concurrent.futures.Future``. Waiting threads therefore do not
hold up other Python threads, and concurrent calls overlap on the loop.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Callable, TypeVar

from .exceptions import ClientClosedError, TransportError, TransportErrorKind
from .models import TransportRequest, TransportResponse
from .transport.base import Transport

logger = logging.getLogger(__name__)

CLOSE_TIMEOUT = 5.0

T = TypeVar("T")


class CancellationToken:
    """Thread-safe cancellation signal for in-flight requests.

    Examples:
        token = CancellationToken()
        threading.Timer(1.0, token.cancel).start()
        client.get(url, cancel=token)  # raises TransportError(kind=cancelled)
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], object]] = []

    @property
    def cancelled(self) -> bool:
        """Check if cancel() has been called."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Cancel every request watching this token. Idempotent."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def add_callback(self, callback: Callable[[], object]) -> None:
        """Run ``callback`` on cancel, or now if already cancelled."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def remove_callback(self, callback: Callable[[], object]) -> None:
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or timeout. Returns the cancelled state."""
        return self._event.wait(timeout)


class TransportExecutor:
    """Dispatches requests to a transport on a private event loop thread."""

    def __init__(self, transport: Transport, name: str = "wreq-client"):
        """Initialize executor.

        Args:
            transport: Transport that performs the network exchange.
            name: Name of the loop thread.
        """
        self._transport = transport
        self._name = name
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._closed = False
        self._pending: set[concurrent.futures.Future] = set()

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def in_flight(self) -> int:
        """Number of submitted requests that have not completed."""
        with self._lock:
            return len(self._pending)

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        """Get or start the loop thread (double-checked locking)."""
        if self._loop is None:
            with self._lock:
                if self._closed:
                    raise ClientClosedError()
                if self._loop is None:
                    loop = asyncio.new_event_loop()
                    thread = threading.Thread(
                        target=self._run_loop,
                        args=(loop,),
                        name=f"{self._name}-loop",
                        daemon=True,
                    )
                    thread.start()
                    self._thread = thread
                    self._loop = loop
        return self._loop

    @staticmethod
    def _run_loop(loop: asyncio.AbstractEventLoop) -> None:
        asyncio.set_event_loop(loop)
        loop.run_forever()

    async def _run(self, request: TransportRequest) -> TransportResponse:
        total = request.timeout.total
        if total is None:
            return await self._transport.connect(request)
        try:
            return await asyncio.wait_for(self._transport.connect(request), total)
        except asyncio.TimeoutError as e:
            raise TransportError(
                TransportErrorKind.TOTAL_TIMEOUT,
                f"request exceeded total timeout of {total}s",
                url=request.url,
                original_error=e,
            ) from e

    def _discard(self, future: concurrent.futures.Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def submit(self, request: TransportRequest) -> concurrent.futures.Future:
        """Schedule a request and return a future for its result.

        Cancelling the future cancels the transfer.

        Raises:
            ClientClosedError: If the executor has been closed.
        """
        loop = self._get_loop()
        # close() flips _closed under the same lock, so a request is either
        # rejected here or tracked in _pending before the loop stops.
        with self._lock:
            if self._closed:
                raise ClientClosedError()
            future = asyncio.run_coroutine_threadsafe(self._run(request), loop)
            self._pending.add(future)
        future.add_done_callback(self._discard)
        return future

    def call(self, func: Callable[..., T], *args: Any) -> T:
        """Run a plain function on the loop thread and return its result.

        Used for state the transport mutates from the loop, such as the
        cookie jar. Runs inline when the loop is not running, or when
        already on the loop thread.
        """
        with self._lock:
            loop = self._loop
            if loop is None or self._closed:
                # No transfer can start while the lock is held.
                return func(*args)
            if threading.current_thread() is self._thread:
                return func(*args)
            future: concurrent.futures.Future = concurrent.futures.Future()

            def run() -> None:
                if not future.set_running_or_notify_cancel():
                    return
                try:
                    future.set_result(func(*args))
                except BaseException as e:
                    future.set_exception(e)

            loop.call_soon_threadsafe(run)
        return future.result()

    def execute(
        self,
        request: TransportRequest,
        cancel: CancellationToken | None = None,
    ) -> TransportResponse:
        """Run a request, blocking only the calling thread.

        Args:
            request: The request to execute.
            cancel: Optional token that aborts the request.

        Returns:
            TransportResponse from the transport.

        Raises:
            TransportError: On transport failure, timeout, or cancellation.
            ClientClosedError: If the executor has been closed.
        """
        if cancel is not None and cancel.cancelled:
            raise TransportError(
                TransportErrorKind.CANCELLED, "request cancelled", url=request.url
            )

        future = self.submit(request)
        if cancel is not None:
            cancel.add_callback(future.cancel)
        try:
            return future.result()
        except concurrent.futures.CancelledError as e:
            logger.debug("%s %s cancelled", request.method, request.url)
            raise TransportError(
                TransportErrorKind.CANCELLED, "request cancelled", url=request.url
            ) from e
        except (KeyboardInterrupt, SystemExit):
            # Interrupted caller: abort the transfer, keep the connection pool.
            future.cancel()
            logger.debug("%s %s interrupted", request.method, request.url)
            raise
        finally:
            if cancel is not None:
                cancel.remove_callback(future.cancel)

    async def execute_async(
        self,
        request: TransportRequest,
        cancel: CancellationToken | None = None,
    ) -> TransportResponse:
        """Await a request from another event loop.

        Cancelling the awaiting task cancels the transfer.
        """
        if cancel is not None and cancel.cancelled:
            raise TransportError(
                TransportErrorKind.CANCELLED, "request cancelled", url=request.url
            )

        future = self.submit(request)
        if cancel is not None:
            cancel.add_callback(future.cancel)
        try:
            return await asyncio.wrap_future(future)
        except asyncio.CancelledError as e:
            # Cancelled through the token, not by our caller.
            if cancel is not None and cancel.cancelled and future.cancelled():
                raise TransportError(
                    TransportErrorKind.CANCELLED, "request cancelled", url=request.url
                ) from e
            raise
        finally:
            if cancel is not None:
                cancel.remove_callback(future.cancel)

    def close(self) -> None:
        """Cancel in-flight requests, close the transport, stop the loop."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            loop, thread = self._loop, self._thread
            pending = list(self._pending)

        for future in pending:
            future.cancel()

        if loop is None:
            return

        try:
            asyncio.run_coroutine_threadsafe(self._transport.close(), loop).result(
                CLOSE_TIMEOUT
            )
        finally:
            loop.call_soon_threadsafe(loop.stop)
            if thread is not None and thread is not threading.current_thread():
                thread.join(CLOSE_TIMEOUT)
                if not thread.is_alive():
                    loop.close()
