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
"""Unified exception hierarchy for flyrequest.

All library exceptions inherit from FlyRequestException. Transport failures
are not part of this hierarchy: errors raised by the HTTP transport are
attached to the request verbatim and reported through its observers.

Categories:
- RequestStateException: an operation is not allowed in the request's state
- ConfigurationException: invalid settings (queue limits, properties)
"""

from __future__ import annotations


class FlyRequestException(Exception):
    """Base exception for all flyrequest errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "REQUEST_STATE").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class RequestStateException(FlyRequestException):
    """Operation is not allowed in the request's current lifecycle state."""


class ConfigurationException(FlyRequestException):
    """A configuration value is out of range or malformed."""
