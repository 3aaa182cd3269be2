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
"""httpx-based transport adapter."""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import Any

import httpx
import structlog

from flyrequest.config.properties.transport import TransportProperties
from flyrequest.transport.ports.outbound import ExchangeListener
from flyrequest.transport.types import CachePolicy, Exchange, ResponseInfo

logger = structlog.get_logger("flyrequest.transport")

_NO_CACHE = (("Cache-Control", "no-cache"), ("Pragma", "no-cache"))

_CACHE_POLICY_HEADERS: dict[CachePolicy, tuple[tuple[str, str], ...]] = {
    CachePolicy.USE_PROTOCOL_DEFAULT: (),
    CachePolicy.IGNORE_CACHE: _NO_CACHE,
    CachePolicy.RELOAD_IGNORING_CACHE: _NO_CACHE,
    CachePolicy.RETURN_CACHE_ONLY: (("Cache-Control", "only-if-cached"),),
}


def cache_policy_headers(exchange: Exchange) -> list[tuple[str, str]]:
    """Request headers for *exchange*, with its cache policy applied.

    A ``Cache-Control`` header set by the caller takes precedence over the
    policy.
    """
    headers = list(exchange.headers)
    if any(name.lower() == "cache-control" for name, _ in headers):
        return headers
    headers.extend(_CACHE_POLICY_HEADERS[exchange.cache_policy])
    return headers


class HttpxExchangeHandle:
    """Cancellation handle for an exchange running as an asyncio task."""

    def __init__(self, task: asyncio.Task[None], loop: asyncio.AbstractEventLoop) -> None:
        self._task = task
        self._loop = loop

    @property
    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> None:
        if self._task.done():
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self._task.cancel()
        else:
            self._loop.call_soon_threadsafe(self._task.cancel)


class HttpxTransport:
    """Transport backed by httpx.AsyncClient.

    Responses are streamed: metadata is reported as soon as headers
    arrive, and the body is delivered in chunks as httpx decodes it.
    Every exception raised while building, sending or reading the
    request is passed to the listener unchanged.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: timedelta = timedelta(seconds=60),
        follow_redirects: bool = True,
        max_connections: int = 100,
        user_agent: str | None = None,
    ) -> None:
        if client is None:
            client = httpx.AsyncClient(
                timeout=timeout.total_seconds(),
                follow_redirects=follow_redirects,
                limits=httpx.Limits(max_connections=max_connections),
                headers={"User-Agent": user_agent} if user_agent else None,
            )
        self._client = client
        self._tasks: set[asyncio.Task[Any]] = set()

    @classmethod
    def from_properties(cls, properties: TransportProperties) -> HttpxTransport:
        return cls(
            timeout=properties.timeout_delta,
            follow_redirects=properties.follow_redirects,
            max_connections=properties.max_connections,
            user_agent=properties.user_agent,
        )

    @property
    def in_flight(self) -> int:
        """Number of exchanges that have not finished yet."""
        return len(self._tasks)

    def open(self, exchange: Exchange, listener: ExchangeListener) -> HttpxExchangeHandle:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._run(exchange, listener))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return HttpxExchangeHandle(task, loop)

    async def _run(self, exchange: Exchange, listener: ExchangeListener) -> None:
        timeout: Any = httpx.USE_CLIENT_DEFAULT
        if exchange.timeout is not None:
            timeout = exchange.timeout.total_seconds()

        try:
            request = self._client.build_request(
                exchange.method,
                exchange.url,
                headers=cache_policy_headers(exchange),
                content=exchange.body,
                timeout=timeout,
            )
            response = await self._client.send(request, stream=True)
            try:
                listener.on_response(ResponseInfo.from_httpx(response))
                async for chunk in response.aiter_bytes():
                    listener.on_data(chunk)
            finally:
                await response.aclose()
        except Exception as exc:
            logger.debug(
                "exchange_failed",
                method=exchange.method,
                url=exchange.url,
                error=repr(exc),
            )
            listener.on_error(exc)
            return

        listener.on_complete()

    async def close(self) -> None:
        """Close the underlying HTTP client.

        Exchanges still in flight fail with the error httpx raises for a
        closed client.
        """
        await self._client.aclose()
