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
"""Outbound port: asynchronous HTTP transport.

A transport performs one exchange per ``open`` call and reports progress
to an :class:`ExchangeListener`. Listener callbacks arrive in order:
``on_response`` (at most once), ``on_data`` (zero or more), then exactly
one of ``on_complete`` or ``on_error``. A cancelled exchange produces no
further callbacks.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from flyrequest.transport.types import Exchange, ResponseInfo


@runtime_checkable
class ExchangeListener(Protocol):
    """Receives events for a single exchange."""

    def on_response(self, info: ResponseInfo) -> None: ...

    def on_data(self, chunk: bytes) -> None: ...

    def on_complete(self) -> None: ...

    def on_error(self, error: BaseException) -> None: ...


@runtime_checkable
class ExchangeHandle(Protocol):
    """Handle to an in-flight exchange."""

    def cancel(self) -> None:
        """Abort the exchange. Safe to call from any thread, and more than once."""
        ...


@runtime_checkable
class TransportPort(Protocol):
    """Abstract asynchronous HTTP transport."""

    def open(self, exchange: Exchange, listener: ExchangeListener) -> ExchangeHandle:
        """Schedule *exchange* and return immediately.

        Must be called on the event loop thread.
        """
        ...

    async def close(self) -> None: ...
