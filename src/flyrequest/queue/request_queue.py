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
"""Bounded-concurrency FIFO queue of HTTP requests."""

from __future__ import annotations

import threading
from collections import deque
from typing import TYPE_CHECKING

import structlog

from flyrequest.config.properties.queue import QueueProperties
from flyrequest.core.config import Config
from flyrequest.kernel.exceptions import ConfigurationException

if TYPE_CHECKING:
    from flyrequest.request.http_request import HttpRequest

logger = structlog.get_logger("flyrequest.queue")


def _validate_limit(limit: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ConfigurationException(
            f"Maximum concurrent connections must be a positive integer, got {limit!r}",
            code="QUEUE_LIMIT",
            context={"limit": limit},
        )
    return limit


class RequestQueue:
    """Admits queued requests in FIFO order, at most N executing at a time.

    Every mutation of the pending/executing bookkeeping happens under one
    lock. Requests are admitted under the lock but their transport
    exchanges are opened after it is released, so a request finishing
    synchronously inside its transport can re-enter the queue safely.

    The backlog is unbounded: ``add`` never rejects a request.
    """

    def __init__(self, properties: QueueProperties | None = None) -> None:
        properties = properties if properties is not None else QueueProperties()
        self._max_concurrent = _validate_limit(properties.max_concurrent_connections)
        self._pending: deque[HttpRequest] = deque()
        self._executing: set[HttpRequest] = set()
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: Config) -> RequestQueue:
        return cls(config.bind(QueueProperties))

    @property
    def max_concurrent_connections(self) -> int:
        return self._max_concurrent

    def set_maximum_concurrent_connections(self, limit: int) -> None:
        """Change the concurrency limit for future admissions.

        Lowering the limit never interrupts executing requests; raising it
        admits waiting requests straight away.
        """
        _validate_limit(limit)
        with self._lock:
            previous, self._max_concurrent = self._max_concurrent, limit
            admitted = self._admit()
        logger.info("queue_limit_changed", previous=previous, limit=limit)
        self._start(admitted)

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    @property
    def executing_count(self) -> int:
        with self._lock:
            return len(self._executing)

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending) + len(self._executing)

    def __contains__(self, request: object) -> bool:
        with self._lock:
            return request in self._executing or request in self._pending

    def add(self, request: HttpRequest) -> None:
        """Append *request* to the backlog and admit whatever fits.

        A request cancelled before it reached the queue is not added.
        """
        with self._lock:
            if request.state.is_terminal:
                return
            self._pending.append(request)
            admitted = self._admit()
            pending = len(self._pending)
        if not admitted:
            logger.debug("request_waiting", url=request.url, pending=pending)
        self._start(admitted)

    def request_terminated(self, request: HttpRequest) -> None:
        """Forget a request that completed, failed or was cancelled."""
        with self._lock:
            self._executing.discard(request)
            if request in self._pending:
                self._pending.remove(request)
            admitted = self._admit()
        self._start(admitted)

    def _admit(self) -> list[HttpRequest]:
        # Caller holds self._lock.
        admitted: list[HttpRequest] = []
        while self._pending and len(self._executing) < self._max_concurrent:
            request = self._pending.popleft()
            if request.mark_admitted():
                self._executing.add(request)
                admitted.append(request)
        return admitted

    def _start(self, admitted: list[HttpRequest]) -> None:
        for request in admitted:
            logger.debug("request_admitted", method=request.method, url=request.url)
            request.begin_exchange()


_default_lock = threading.Lock()
_default_queue: RequestQueue | None = None


def get_default_queue() -> RequestQueue:
    """The process-wide queue used by ``HttpRequest.enqueue``, created on first use."""
    global _default_queue
    with _default_lock:
        if _default_queue is None:
            _default_queue = RequestQueue()
        return _default_queue


def set_default_queue(queue: RequestQueue | None) -> RequestQueue | None:
    """Install *queue* as the process-wide queue and return the previous one.

    ``None`` resets it; the next lookup creates a queue with default
    properties. Requests already in the previous queue stay there.
    """
    global _default_queue
    with _default_lock:
        previous, _default_queue = _default_queue, queue
    return previous


def set_maximum_concurrent_connections(limit: int) -> None:
    """Set the concurrency limit of the process-wide queue."""
    get_default_queue().set_maximum_concurrent_connections(limit)
