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
"""Inline dispatcher adapter."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any


class InlineDispatcher:
    """Runs callbacks synchronously in the caller's context.

    For requests this is the transport's callback context, i.e. the event
    loop thread. Code that needs thread affinity with the loop relies on
    this being the default.
    """

    def dispatch(self, fn: Callable[..., Any], *args: Any) -> None:
        fn(*args)
