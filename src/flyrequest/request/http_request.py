# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""HttpRequest: one asynchronous HTTP call with observer notification."""

from __future__ import annotations

import asyncio
import threading
import weakref
from collections.abc import Callable, Iterable, Mapping
from datetime import timedelta
from typing import Any

import httpx
import structlog

from flyrequest.dispatch.adapters.inline import InlineDispatcher
from flyrequest.dispatch.adapters.thread_pool import get_background_dispatcher
from flyrequest.dispatch.ports.outbound import DispatcherPort
from flyrequest.kernel.exceptions import RequestStateException
from flyrequest.queue.request_queue import RequestQueue, get_default_queue
from flyrequest.request.delegate import CompletionHandler, OneShotCompletion
from flyrequest.request.encoding import decode_response_text
from flyrequest.request.state import RequestState
from flyrequest.transport.defaults import get_default_transport
from flyrequest.transport.ports.outbound import ExchangeHandle, TransportPort
from flyrequest.transport.types import CachePolicy, Exchange, ResponseInfo

logger = structlog.get_logger("flyrequest.request")

HeaderInput = Mapping[str, str] | Iterable[tuple[str, str]]


class _ExchangeCallbacks:
    """ExchangeListener forwarding transport events to its request."""

    __slots__ = ("_request",)

    def __init__(self, request: HttpRequest) -> None:
        self._request = request

    def on_response(self, info: ResponseInfo) -> None:
        self._request._handle_response(info)

    def on_data(self, chunk: bytes) -> None:
        self._request._handle_data(chunk)

    def on_complete(self) -> None:
        self._request._handle_complete()

    def on_error(self, error: BaseException) -> None:
        self._request._handle_error(error)


class HttpRequest:
    """An HTTP request with a managed lifecycle.

    Configure the request, then start it with :meth:`start_immediately`
    (no concurrency limit) or :meth:`enqueue` (admitted by a
    :class:`~flyrequest.queue.RequestQueue`). Both return at once; the
    outcome is reported to the delegate and/or the completion handler:

        request = HttpRequest("https://example.org/items")
        request.method = "POST"
        request.add_header("Content-Type", "application/json")
        request.body = b'{"name": "widget"}'
        request.enqueue(lambda req, error: print(req.status_code, error))

    Exactly one of ``request_finished`` / ``request_failed`` fires per
    request, and neither fires after :meth:`cancel`. With no delegate and
    no completion handler the outcome is only visible through ``state``,
    ``error`` and :meth:`wait`; errors are not raised anywhere.
    """

    def __init__(
        self,
        url: str | httpx.URL,
        *,
        transport: TransportPort | None = None,
        dispatcher: DispatcherPort | None = None,
    ) -> None:
        self._url = str(url)
        self._method = "GET"
        self._header_items: list[tuple[str, str]] = []
        self._body: bytes | None = None
        self._cache_policy = CachePolicy.USE_PROTOCOL_DEFAULT
        self._timeout: timedelta | None = None
        self.user_info: Any = None

        self._transport = transport
        self._dispatcher: DispatcherPort = dispatcher if dispatcher is not None else InlineDispatcher()
        self._delegate_ref: weakref.ref[Any] | None = None
        self._completion = OneShotCompletion()

        self._lock = threading.Lock()
        self._state = RequestState.CREATED
        self._loop: asyncio.AbstractEventLoop | None = None
        self._queue: RequestQueue | None = None
        self._handle: ExchangeHandle | None = None
        self._finished: asyncio.Future[RequestState] | None = None

        self._response: ResponseInfo | None = None
        self._response_data = bytearray()
        self._response_text: str | None = None
        self._error: BaseException | None = None

    @classmethod
    def with_url(cls, url: str | httpx.URL, **kwargs: Any) -> HttpRequest:
        return cls(url, **kwargs)

    def __repr__(self) -> str:
        return f"<HttpRequest {self._method} {self._url} [{self._state.value}]>"

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def _check_configurable(self, action: str) -> None:
        if self._state is not RequestState.CREATED:
            raise RequestStateException(
                f"Cannot {action} once the request is {self._state.value}",
                code="REQUEST_STATE",
                context={"state": self._state.value, "url": self._url},
            )

    @property
    def url(self) -> str:
        return self._url

    @url.setter
    def url(self, value: str | httpx.URL) -> None:
        self._check_configurable("change the URL")
        self._url = str(value)

    @property
    def method(self) -> str:
        return self._method

    @method.setter
    def method(self, value: str) -> None:
        self._check_configurable("change the method")
        if not value:
            raise ValueError("HTTP method must be a non-empty string")
        self._method = value.upper()

    @property
    def headers(self) -> httpx.Headers:
        """Snapshot of the request headers; repeated fields keep every value."""
        return httpx.Headers(self._header_items)

    @headers.setter
    def headers(self, value: HeaderInput | None) -> None:
        self._check_configurable("replace headers")
        if isinstance(value, httpx.Headers):
            items: Iterable[tuple[str, str]] = value.multi_items()
        elif isinstance(value, Mapping):
            items = value.items()
        else:
            items = value or ()
        self._header_items = [(str(field), str(v)) for field, v in items]

    def add_header(self, field: str | None, value: str) -> None:
        """Append *value* for *field*, keeping any values already present."""
        if field is None:
            return
        self._check_configurable("add headers")
        self._header_items.append((field, value))

    def header_values(self, field: str) -> list[str]:
        """All values added for *field* (case-insensitive), in insertion order."""
        return self.headers.get_list(field)

    @property
    def body(self) -> bytes | None:
        return self._body

    @body.setter
    def body(self, value: bytes | bytearray | str | None) -> None:
        self._check_configurable("change the body")
        if isinstance(value, str):
            value = value.encode("utf-8")
        self._body = bytes(value) if value is not None else None

    @property
    def cache_policy(self) -> CachePolicy:
        return self._cache_policy

    @cache_policy.setter
    def cache_policy(self, value: CachePolicy) -> None:
        self._check_configurable("change the cache policy")
        self._cache_policy = CachePolicy(value)

    @property
    def timeout(self) -> timedelta | None:
        """Per-request timeout; ``None`` uses the transport's default."""
        return self._timeout

    @timeout.setter
    def timeout(self, value: timedelta | None) -> None:
        self._check_configurable("change the timeout")
        if value is not None and value <= timedelta(0):
            raise ValueError(f"Timeout must be positive, got {value}")
        self._timeout = value

    def configure(self, **changes: Any) -> HttpRequest:
        """Set several configuration attributes at once.

        Accepts ``url``, ``method``, ``headers``, ``body``, ``cache_policy``,
        ``timeout`` and ``user_info``. Returns the request for chaining.
        """
        self._check_configurable("configure")
        unknown = set(changes) - _CONFIGURABLE
        if unknown:
            raise TypeError(f"Unknown request attributes: {', '.join(sorted(unknown))}")
        for name, value in changes.items():
            setattr(self, name, value)
        return self

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    @property
    def delegate(self) -> Any:
        """The delegate, or ``None`` if unset or already garbage collected."""
        return self._delegate_ref() if self._delegate_ref is not None else None

    @delegate.setter
    def delegate(self, value: Any) -> None:
        self._delegate_ref = weakref.ref(value) if value is not None else None

    @property
    def dispatcher(self) -> DispatcherPort:
        return self._dispatcher

    @dispatcher.setter
    def dispatcher(self, value: DispatcherPort) -> None:
        self._dispatcher = value

    @property
    def should_use_background_thread(self) -> bool:
        return not isinstance(self._dispatcher, InlineDispatcher)

    @should_use_background_thread.setter
    def should_use_background_thread(self, value: bool) -> None:
        self._dispatcher = get_background_dispatcher() if value else InlineDispatcher()

    # ------------------------------------------------------------------
    # Runtime state
    # ------------------------------------------------------------------

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def response(self) -> ResponseInfo | None:
        return self._response

    @property
    def status_code(self) -> int | None:
        return self._response.status_code if self._response is not None else None

    @property
    def response_data(self) -> bytes:
        return bytes(self._response_data)

    @property
    def response_text(self) -> str | None:
        """Decoded body; set when the request completes, ``None`` before."""
        return self._response_text

    @property
    def error(self) -> BaseException | None:
        return self._error

    async def wait(self) -> RequestState:
        """Wait until the request reaches a terminal state and return it.

        Does not raise the transport error; inspect :attr:`error` instead.
        """
        if self._finished is None:
            raise RequestStateException("Request has not been started", code="REQUEST_STATE")
        return await asyncio.shield(self._finished)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_immediately(self, completion: CompletionHandler | None = None) -> None:
        """Start now, bypassing any queue and its concurrency limit.

        Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()
        with self._lock:
            self._check_configurable("start")
            self._state = RequestState.EXECUTING
            self._bind(loop, completion)
        logger.debug("request_started", method=self._method, url=self._url)
        self._open_exchange()

    def enqueue(
        self,
        completion: CompletionHandler | None = None,
        queue: RequestQueue | None = None,
    ) -> None:
        """Submit to *queue* (the process-wide queue by default).

        Must be called from a running event loop. The request executes
        once the queue has a free slot.
        """
        loop = asyncio.get_running_loop()
        target = queue if queue is not None else get_default_queue()
        with self._lock:
            self._check_configurable("enqueue")
            self._state = RequestState.QUEUED
            self._bind(loop, completion)
            self._queue = target
        logger.debug("request_enqueued", method=self._method, url=self._url)
        target.add(self)

    def cancel(self) -> None:
        """Cancel a queued or executing request.

        Buffered response bytes are discarded and the completion handler is
        dropped without being called. No-op in any other state.
        """
        with self._lock:
            if not self._state.is_active:
                return
            previous = self._state
            self._state = RequestState.CANCELLED
            handle, self._handle = self._handle, None
            self._response_data.clear()
            self._completion.release()
            queue = self._queue

        if handle is not None:
            handle.cancel()
        logger.debug("request_cancelled", url=self._url, previous_state=previous.value)
        self._after_terminal(queue)

    def _bind(self, loop: asyncio.AbstractEventLoop, completion: CompletionHandler | None) -> None:
        self._loop = loop
        self._finished = loop.create_future()
        self._completion.set(completion)

    def mark_admitted(self) -> bool:
        """Move from ``QUEUED`` to ``EXECUTING``; called by the queue.

        Returns False if the request is no longer queued.
        """
        with self._lock:
            if self._state is not RequestState.QUEUED:
                return False
            self._state = RequestState.EXECUTING
            return True

    def begin_exchange(self) -> None:
        """Open the transport exchange on the request's event loop."""
        self._call_in_loop(self._open_exchange)

    def _call_in_loop(self, fn: Callable[[], None]) -> None:
        if self._loop is None:
            raise RequestStateException("Request has not been started", code="REQUEST_STATE")
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            fn()
        else:
            self._loop.call_soon_threadsafe(fn)

    def _open_exchange(self) -> None:
        with self._lock:
            if self._state is not RequestState.EXECUTING or self._handle is not None:
                return
            exchange = Exchange(
                method=self._method,
                url=self._url,
                headers=tuple(self._header_items),
                body=self._body,
                cache_policy=self._cache_policy,
                timeout=self._timeout,
            )

        transport = self._transport if self._transport is not None else get_default_transport()
        try:
            handle = transport.open(exchange, _ExchangeCallbacks(self))
        except Exception as exc:
            self._handle_error(exc)
            return

        with self._lock:
            if self._state is RequestState.EXECUTING:
                self._handle = handle
                return
            cancelled = self._state is RequestState.CANCELLED
        if cancelled:
            handle.cancel()

    # ------------------------------------------------------------------
    # Transport events
    # ------------------------------------------------------------------

    def _handle_response(self, info: ResponseInfo) -> None:
        with self._lock:
            if self._state is not RequestState.EXECUTING:
                return
            self._response = info
        self._notify("request_received_response", self, info)

    def _handle_data(self, chunk: bytes) -> None:
        with self._lock:
            if self._state is RequestState.EXECUTING:
                self._response_data.extend(chunk)

    def _handle_complete(self) -> None:
        with self._lock:
            if not self._enter_terminal(RequestState.COMPLETED):
                return
            headers = self._response.headers if self._response is not None else None
            self._response_text = decode_response_text(bytes(self._response_data), headers)
            completion = self._completion.take()
            queue = self._queue

        logger.debug(
            "request_completed",
            method=self._method,
            url=self._url,
            status_code=self.status_code,
            size=len(self._response_data),
        )
        self._after_terminal(queue)
        self._notify_terminal("request_finished", (self,), completion, None)

    def _handle_error(self, error: BaseException) -> None:
        with self._lock:
            if not self._enter_terminal(RequestState.FAILED):
                return
            self._error = error
            completion = self._completion.take()
            queue = self._queue

        logger.debug(
            "request_failed",
            method=self._method,
            url=self._url,
            error=repr(error),
            observed=completion is not None or self.delegate is not None,
        )
        self._after_terminal(queue)
        self._notify_terminal("request_failed", (self, error), completion, error)

    def _enter_terminal(self, state: RequestState) -> bool:
        # Caller holds self._lock.
        if not self._state.is_active:
            return False
        self._state = state
        self._handle = None
        return True

    def _after_terminal(self, queue: RequestQueue | None) -> None:
        self._call_in_loop(self._resolve_finished)
        if queue is not None:
            queue.request_terminated(self)

    def _resolve_finished(self) -> None:
        if self._finished is not None and not self._finished.done():
            self._finished.set_result(self._state)

    # ------------------------------------------------------------------
    # Notification
    # ------------------------------------------------------------------

    def _notify(self, hook: str, *args: Any) -> None:
        delegate = self.delegate
        callback = getattr(delegate, hook, None) if delegate is not None else None
        if callback is not None:
            self._dispatcher.dispatch(self._deliver, callback, args, False)

    def _notify_terminal(
        self,
        hook: str,
        args: tuple[Any, ...],
        completion: CompletionHandler | None,
        error: BaseException | None,
    ) -> None:
        delegate = self.delegate
        callback = getattr(delegate, hook, None) if delegate is not None else None
        if callback is not None:
            self._dispatcher.dispatch(self._deliver, callback, args, True)
        if completion is not None:
            self._dispatcher.dispatch(self._deliver, completion, (self, error), True)

    def _deliver(self, callback: Callable[..., Any], args: tuple[Any, ...], terminal: bool) -> None:
        if not terminal and self._state is RequestState.CANCELLED:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception(
                "request_observer_failed",
                url=self._url,
                callback=getattr(callback, "__qualname__", repr(callback)),
            )


_CONFIGURABLE = frozenset({"url", "method", "headers", "body", "cache_policy", "timeout", "user_info"})
