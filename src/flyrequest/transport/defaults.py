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
"""Process-wide default transport."""

from __future__ import annotations

import threading

from flyrequest.transport.adapters.httpx_adapter import HttpxTransport
from flyrequest.transport.ports.outbound import TransportPort

_lock = threading.Lock()
_default_transport: TransportPort | None = None


def get_default_transport() -> TransportPort:
    """Return the shared transport, creating an HttpxTransport on first use."""
    global _default_transport
    with _lock:
        if _default_transport is None:
            _default_transport = HttpxTransport()
        return _default_transport


def set_default_transport(transport: TransportPort | None) -> TransportPort | None:
    """Install *transport* as the shared default. Returns the previous one.

    Passing ``None`` resets the default so the next lookup creates a fresh
    HttpxTransport. The previous transport is not closed.
    """
    global _default_transport
    with _lock:
        previous, _default_transport = _default_transport, transport
    return previous
