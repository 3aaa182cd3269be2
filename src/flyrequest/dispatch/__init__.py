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
"""flyrequest dispatch: where request observers are notified."""

from flyrequest.dispatch.adapters.inline import InlineDispatcher
from flyrequest.dispatch.adapters.thread_pool import (
    ThreadPoolDispatcher,
    get_background_dispatcher,
    shutdown_background_dispatcher,
)
from flyrequest.dispatch.ports.outbound import DispatcherPort

__all__ = [
    "DispatcherPort",
    "InlineDispatcher",
    "ThreadPoolDispatcher",
    "get_background_dispatcher",
    "shutdown_background_dispatcher",
]
