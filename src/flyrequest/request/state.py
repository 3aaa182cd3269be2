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
"""Request lifecycle states."""

from __future__ import annotations

from enum import Enum


class RequestState(Enum):
    """Lifecycle of an HttpRequest.

    ``CREATED`` is the configuration window. A request leaves it through
    ``start_immediately`` (straight to ``EXECUTING``) or ``enqueue``
    (``QUEUED`` until the queue admits it). ``COMPLETED``, ``FAILED`` and
    ``CANCELLED`` are terminal.
    """

    CREATED = "created"
    QUEUED = "queued"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        return self in (RequestState.QUEUED, RequestState.EXECUTING)

    @property
    def is_terminal(self) -> bool:
        return self in (RequestState.COMPLETED, RequestState.FAILED, RequestState.CANCELLED)
