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
"""Tests for response text decoding."""

import httpx

from flyrequest.request.encoding import DEFAULT_ENCODING, content_type_charset, decode_response_text


class TestContentTypeCharset:
    def test_reads_charset_parameter(self):
        headers = httpx.Headers({"Content-Type": 'text/html; charset="Shift_JIS"'})
        assert content_type_charset(headers) == "shift_jis"

    def test_missing_header(self):
        assert content_type_charset(httpx.Headers()) is None
        assert content_type_charset(None) is None

    def test_content_type_without_charset(self):
        assert content_type_charset(httpx.Headers({"Content-Type": "application/json"})) is None


class TestDecodeResponseText:
    def test_default_encoding_is_utf8(self):
        assert DEFAULT_ENCODING == "utf-8"
        assert decode_response_text("naïve".encode()) == "naïve"

    def test_declared_charset_wins(self):
        headers = httpx.Headers({"Content-Type": "text/plain; charset=cp1252"})
        assert decode_response_text("€10".encode("cp1252"), headers) == "€10"

    def test_unknown_charset_falls_back_to_utf8(self):
        headers = httpx.Headers({"Content-Type": "text/plain; charset=x-no-such-codec"})
        assert decode_response_text(b"plain", headers) == "plain"

    def test_wrong_charset_falls_back_to_utf8(self):
        headers = httpx.Headers({"Content-Type": "text/plain; charset=ascii"})
        assert decode_response_text("ünïcode".encode(), headers) == "ünïcode"

    def test_undecodable_bytes_give_empty_text(self):
        assert decode_response_text(b"\xc3\x28\xa0\xa1") == ""

    def test_empty_body(self):
        assert decode_response_text(b"") == ""
