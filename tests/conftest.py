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
"""Shared fixtures: a scripted transport and isolation of process-wide defaults."""

from __future__ import annotations

import httpx
import pytest

from flyrequest.dispatch.adapters.thread_pool import shutdown_background_dispatcher
from flyrequest.queue.request_queue import set_default_queue
from flyrequest.transport.defaults import set_default_transport
from flyrequest.transport.ports.outbound import ExchangeListener
from flyrequest.transport.types import Exchange, ResponseInfo


class ScriptedExchange:
    """An exchange whose events are fired by the test."""

    def __init__(self, exchange: Exchange, listener: ExchangeListener) -> None:
        self.exchange = exchange
        self.listener = listener
        self.cancel_calls = 0

    @property
    def cancelled(self) -> bool:
        return self.cancel_calls > 0

    def cancel(self) -> None:
        self.cancel_calls += 1

    def send_response(self, status_code: int = 200, headers: dict[str, str] | None = None) -> None:
        self.listener.on_response(
            ResponseInfo(status_code=status_code, headers=httpx.Headers(headers or {}), url=self.exchange.url)
        )

    def send_data(self, *chunks: bytes) -> None:
        for chunk in chunks:
            self.listener.on_data(chunk)

    def succeed(
        self,
        body: bytes = b"",
        status_code: int = 200,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.send_response(status_code, headers)
        if body:
            self.send_data(body)
        self.listener.on_complete()

    def fail(self, error: BaseException) -> None:
        self.listener.on_error(error)


class ScriptedTransport:
    """TransportPort that records exchanges instead of performing them."""

    def __init__(self) -> None:
        self.exchanges: list[ScriptedExchange] = []
        self.closed = False

    def open(self, exchange: Exchange, listener: ExchangeListener) -> ScriptedExchange:
        handle = ScriptedExchange(exchange, listener)
        self.exchanges.append(handle)
        return handle

    def exchange_for(self, url: str) -> ScriptedExchange:
        return next(h for h in self.exchanges if h.exchange.url == url)

    @property
    def opened_urls(self) -> list[str]:
        return [h.exchange.url for h in self.exchanges]

    async def close(self) -> None:
        self.closed = True


class RecordingDelegate:
    """Delegate recording every notification it receives."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def request_received_response(self, request, response) -> None:
        self.events.append(("response", response.status_code))

    def request_finished(self, request) -> None:
        self.events.append(("finished", request.response_text))

    def request_failed(self, request, error) -> None:
        self.events.append(("failed", error))


@pytest.fixture
def transport() -> ScriptedTransport:
    return ScriptedTransport()


@pytest.fixture
def delegate() -> RecordingDelegate:
    return RecordingDelegate()


@pytest.fixture(autouse=True)
def isolated_defaults():
    """Reset the process-wide queue, transport and background dispatcher."""
    set_default_queue(None)
    set_default_transport(None)
    yield
    set_default_queue(None)
    set_default_transport(None)
    shutdown_background_dispatcher(wait=True)
