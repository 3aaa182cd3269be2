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
"""Background thread dispatcher adapter."""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import structlog

logger = structlog.get_logger("flyrequest.dispatch")


class ThreadPoolDispatcher:
    """Runs callbacks on a single background worker thread.

    One worker keeps callbacks in submission order, so a request's
    notifications are never reordered. Once shut down, callbacks run
    inline on the dispatching thread so late notifications still reach
    their observers.
    """

    def __init__(self, thread_name_prefix: str = "flyrequest-dispatch") -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=thread_name_prefix)
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def dispatch(self, fn: Callable[..., Any], *args: Any) -> None:
        with self._lock:
            if not self._closed:
                self._executor.submit(fn, *args)
                return
        logger.debug("dispatcher_closed_running_inline", callback=getattr(fn, "__qualname__", repr(fn)))
        fn(*args)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker, optionally draining the callbacks already queued."""
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait, cancel_futures=not wait)


_lock = threading.Lock()
_background: ThreadPoolDispatcher | None = None


def get_background_dispatcher() -> ThreadPoolDispatcher:
    """Shared background dispatcher, created on first use."""
    global _background
    with _lock:
        if _background is None:
            _background = ThreadPoolDispatcher()
        return _background


def shutdown_background_dispatcher(wait: bool = True) -> None:
    """Shut down the shared background dispatcher if it was ever created."""
    global _background
    with _lock:
        dispatcher, _background = _background, None
    if dispatcher is not None:
        dispatcher.shutdown(wait=wait)
