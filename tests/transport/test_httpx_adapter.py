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
"""Tests for the httpx transport adapter, driven through httpx.MockTransport."""

from __future__ import annotations

import asyncio
import json
from datetime import timedelta

import httpx
import pytest

from flyrequest.config.properties.queue import QueueProperties
from flyrequest.config.properties.transport import TransportProperties
from flyrequest.queue.request_queue import RequestQueue
from flyrequest.request.http_request import HttpRequest
from flyrequest.request.state import RequestState
from flyrequest.transport.adapters.httpx_adapter import HttpxTransport, cache_policy_headers
from flyrequest.transport.ports.outbound import TransportPort
from flyrequest.transport.types import CachePolicy, Exchange


def mock_transport(handler) -> HttpxTransport:
    return HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestCachePolicyHeaders:
    def test_protocol_default_adds_nothing(self):
        exchange = Exchange("GET", "https://example.test", headers=(("Accept", "*/*"),))
        assert cache_policy_headers(exchange) == [("Accept", "*/*")]

    @pytest.mark.parametrize("policy", [CachePolicy.IGNORE_CACHE, CachePolicy.RELOAD_IGNORING_CACHE])
    def test_ignore_policies_send_no_cache(self, policy):
        headers = cache_policy_headers(Exchange("GET", "https://example.test", cache_policy=policy))
        assert ("Cache-Control", "no-cache") in headers
        assert ("Pragma", "no-cache") in headers

    def test_return_cache_only(self):
        headers = cache_policy_headers(Exchange("GET", "https://example.test", cache_policy=CachePolicy.RETURN_CACHE_ONLY))
        assert headers == [("Cache-Control", "only-if-cached")]

    def test_caller_cache_control_wins(self):
        exchange = Exchange(
            "GET",
            "https://example.test",
            headers=(("cache-control", "max-age=0"),),
            cache_policy=CachePolicy.IGNORE_CACHE,
        )
        assert cache_policy_headers(exchange) == [("cache-control", "max-age=0")]


class TestHttpxTransport:
    def test_conforms_to_ports(self):
        transport = HttpxTransport()
        assert isinstance(transport, TransportPort)

    def test_from_properties(self):
        transport = HttpxTransport.from_properties(
            TransportProperties(timeout=2.5, follow_redirects=False, user_agent="flyrequest-tests")
        )
        assert transport._client.timeout.read == 2.5
        assert transport._client.follow_redirects is False
        assert transport._client.headers["user-agent"] == "flyrequest-tests"

    async def test_round_trip_through_request(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                201,
                headers={"Content-Type": "application/json; charset=utf-8"},
                content=json.dumps({"id": 42, "name": "ünit"}).encode(),
            )

        request = HttpRequest("https://api.example.test/widgets", transport=mock_transport(handler))
        request.configure(method="POST", body=b'{"name": "unit"}', cache_policy=CachePolicy.IGNORE_CACHE)
        request.add_header("X-Tag", "one")
        request.add_header("X-Tag", "two")

        request.start_immediately()
        assert await request.wait() is RequestState.COMPLETED

        [sent] = seen
        assert sent.method == "POST"
        assert sent.content == b'{"name": "unit"}'
        assert sent.headers.get_list("x-tag") == ["one", "two"]
        assert sent.headers["cache-control"] == "no-cache"

        assert request.status_code == 201
        assert request.response.headers["content-type"].startswith("application/json")
        assert json.loads(request.response_text) == {"id": 42, "name": "ünit"}

    async def test_per_request_timeout_passed_to_httpx(self):
        timeouts = []

        def handler(request: httpx.Request) -> httpx.Response:
            timeouts.append(request.extensions["timeout"])
            return httpx.Response(204)

        request = HttpRequest("https://example.test", transport=mock_transport(handler))
        request.timeout = timedelta(seconds=1.5)
        request.start_immediately()
        await request.wait()

        assert timeouts[0]["read"] == 1.5

    async def test_timeout_surfaces_as_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read timed out", request=request)

        errors = []
        request = HttpRequest("https://slow.example.test", transport=mock_transport(handler))
        request.start_immediately(lambda req, err: errors.append(err))

        assert await request.wait() is RequestState.FAILED
        assert isinstance(errors[0], httpx.ReadTimeout)
        assert request.error is errors[0]

    async def test_error_status_is_still_completion(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="maintenance")

        request = HttpRequest("https://example.test", transport=mock_transport(handler))
        request.start_immediately()

        assert await request.wait() is RequestState.COMPLETED
        assert request.status_code == 503
        assert request.response_text == "maintenance"

    async def test_unexpected_exception_fails_request(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise ValueError("malformed upstream reply")

        request = HttpRequest("https://example.test", transport=mock_transport(handler))
        request.start_immediately()
        assert await request.wait() is RequestState.FAILED
        assert isinstance(request.error, ValueError)

    async def test_cancel_in_flight_exchange(self):
        entered = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            entered.set()
            await asyncio.sleep(30)
            return httpx.Response(200)

        calls = []
        transport = mock_transport(handler)
        request = HttpRequest("https://example.test", transport=transport)
        request.start_immediately(lambda req, err: calls.append(err))
        await asyncio.wait_for(entered.wait(), 5)

        request.cancel()
        assert await request.wait() is RequestState.CANCELLED

        for _ in range(10):
            if transport.in_flight == 0:
                break
            await asyncio.sleep(0.01)
        assert transport.in_flight == 0
        assert calls == []

    async def test_queue_with_real_transport(self):
        active = 0
        peak = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return httpx.Response(200, text=request.url.path)

        transport = mock_transport(handler)
        queue = RequestQueue(QueueProperties(max_concurrent_connections=2))
        requests = [HttpRequest(f"https://example.test/{i}", transport=transport) for i in range(6)]
        for request in requests:
            request.enqueue(queue=queue)

        states = await asyncio.gather(*(r.wait() for r in requests))

        assert states == [RequestState.COMPLETED] * 6
        assert peak <= 2
        assert [r.response_text for r in requests] == [f"/{i}" for i in range(6)]

    async def test_close_fails_new_exchanges(self):
        transport = mock_transport(lambda r: httpx.Response(200))
        await transport.close()

        request = HttpRequest("https://example.test", transport=transport)
        request.start_immediately()
        assert await request.wait() is RequestState.FAILED
        assert isinstance(request.error, RuntimeError)
