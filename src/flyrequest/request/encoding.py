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
"""Decoding of buffered response bodies into text."""

from __future__ import annotations

import email.message

import httpx
import structlog

logger = structlog.get_logger("flyrequest.request")

DEFAULT_ENCODING = "utf-8"


def content_type_charset(headers: httpx.Headers | None) -> str | None:
    """Charset parameter of the Content-Type header, lower-cased, if any."""
    if headers is None:
        return None
    content_type = headers.get("content-type")
    if not content_type:
        return None
    message = email.message.Message()
    message["content-type"] = content_type
    return message.get_content_charset(failobj=None)


def decode_response_text(data: bytes, headers: httpx.Headers | None = None) -> str:
    """Decode *data* using the response charset, falling back to UTF-8.

    Returns an empty string when neither encoding can decode the bytes.
    An undecodable body never fails the request.
    """
    if not data:
        return ""

    charset = content_type_charset(headers)
    candidates = [charset, DEFAULT_ENCODING] if charset and charset != DEFAULT_ENCODING else [DEFAULT_ENCODING]
    for encoding in candidates:
        try:
            return data.decode(encoding)
        except (LookupError, UnicodeDecodeError) as exc:
            logger.debug("response_decode_failed", encoding=encoding, error=str(exc))

    return ""
