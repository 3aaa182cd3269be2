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
"""flyrequest: asynchronous HTTP requests with delegates, callbacks and a bounded queue."""

from flyrequest.auto_configuration import configure, shutdown
from flyrequest.core.config import Config
from flyrequest.dispatch import DispatcherPort, InlineDispatcher, ThreadPoolDispatcher
from flyrequest.kernel.exceptions import (
    ConfigurationException,
    FlyRequestException,
    RequestStateException,
)
from flyrequest.queue import (
    RequestQueue,
    get_default_queue,
    set_default_queue,
    set_maximum_concurrent_connections,
)
from flyrequest.request import (
    CompletionHandler,
    HttpRequest,
    RequestDelegate,
    RequestState,
)
from flyrequest.transport import CachePolicy, HttpxTransport, ResponseInfo, TransportPort

__version__ = "0.1.0"

__all__ = [
    "CachePolicy",
    "CompletionHandler",
    "Config",
    "ConfigurationException",
    "DispatcherPort",
    "FlyRequestException",
    "HttpRequest",
    "HttpxTransport",
    "InlineDispatcher",
    "RequestDelegate",
    "RequestQueue",
    "RequestState",
    "RequestStateException",
    "ResponseInfo",
    "ThreadPoolDispatcher",
    "TransportPort",
    "configure",
    "get_default_queue",
    "set_default_queue",
    "set_maximum_concurrent_connections",
    "shutdown",
]
