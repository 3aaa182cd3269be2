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
"""Value types exchanged between requests and transports."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum

import httpx


class CachePolicy(Enum):
    """How the transport should treat cached responses."""

    USE_PROTOCOL_DEFAULT = "use_protocol_default"
    IGNORE_CACHE = "ignore_cache"
    RETURN_CACHE_ONLY = "return_cache_only"
    RELOAD_IGNORING_CACHE = "reload_ignoring_cache"


@dataclass(frozen=True)
class Exchange:
    """Everything a transport needs to perform one HTTP call."""

    method: str
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes | None = None
    cache_policy: CachePolicy = CachePolicy.USE_PROTOCOL_DEFAULT
    timeout: timedelta | None = None


@dataclass(frozen=True)
class ResponseInfo:
    """Response metadata, available once the status line and headers arrive."""

    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    url: str = ""
    reason_phrase: str = ""
    http_version: str = "HTTP/1.1"

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> ResponseInfo:
        return cls(
            status_code=response.status_code,
            headers=response.headers,
            url=str(response.url),
            reason_phrase=response.reason_phrase,
            http_version=response.http_version,
        )
