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
"""Observer contracts for request completion."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from flyrequest.request.http_request import HttpRequest
    from flyrequest.transport.types import ResponseInfo

CompletionHandler = Callable[["HttpRequest", "BaseException | None"], Any]


class RequestDelegate:
    """Optional base class for request delegates.

    Every hook is optional: a delegate may be any object, and hooks it does
    not define are skipped. Requests hold delegates weakly, so the caller
    must keep its delegate alive for as long as it wants notifications.
    """

    def request_received_response(self, request: HttpRequest, response: ResponseInfo) -> None:
        """Response status and headers arrived. May be called before the body."""

    def request_finished(self, request: HttpRequest) -> None:
        """The request completed; ``response_text`` and ``response_data`` are final."""

    def request_failed(self, request: HttpRequest, error: BaseException) -> None:
        """The transport reported *error*; it is also available as ``request.error``."""


class OneShotCompletion:
    """Owned slot for a completion handler that can be taken at most once.

    ``take`` hands the handler out and empties the slot, so whoever takes
    it is the only party that can ever invoke it. ``release`` empties the
    slot without handing anything out.
    """

    __slots__ = ("_handler", "_lock")

    def __init__(self, handler: CompletionHandler | None = None) -> None:
        self._handler = handler
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._handler is not None

    def set(self, handler: CompletionHandler | None) -> None:
        with self._lock:
            self._handler = handler

    def take(self) -> CompletionHandler | None:
        with self._lock:
            handler, self._handler = self._handler, None
        return handler

    def release(self) -> None:
        self.take()
