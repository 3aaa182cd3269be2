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
"""Transport configuration properties."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from flyrequest.core.config import config_properties


@config_properties(prefix="flyrequest.transport")
@dataclass
class TransportProperties:
    """Configuration for the httpx transport (flyrequest.transport.*).

    ``timeout`` is in seconds and applies to requests that do not set
    their own timeout.
    """

    timeout: float = 60.0
    follow_redirects: bool = True
    max_connections: int = 100
    user_agent: str | None = None

    @property
    def timeout_delta(self) -> timedelta:
        return timedelta(seconds=self.timeout)
