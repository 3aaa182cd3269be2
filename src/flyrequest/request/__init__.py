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
"""flyrequest request: the HTTP request entity and its observer contracts."""

from flyrequest.request.delegate import CompletionHandler, OneShotCompletion, RequestDelegate
from flyrequest.request.encoding import DEFAULT_ENCODING, decode_response_text
from flyrequest.request.http_request import HttpRequest
from flyrequest.request.state import RequestState

__all__ = [
    "DEFAULT_ENCODING",
    "CompletionHandler",
    "HttpRequest",
    "OneShotCompletion",
    "RequestDelegate",
    "RequestState",
    "decode_response_text",
]
