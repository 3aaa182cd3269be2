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
"""Tests for the exception hierarchy."""

import pytest

from flyrequest.kernel.exceptions import ConfigurationException, FlyRequestException, RequestStateException


class TestExceptions:
    @pytest.mark.parametrize("exc_type", [RequestStateException, ConfigurationException])
    def test_subclasses_share_base(self, exc_type):
        assert issubclass(exc_type, FlyRequestException)

    def test_code_and_context(self):
        exc = RequestStateException("already started", code="REQUEST_STATE", context={"state": "executing"})
        assert str(exc) == "already started"
        assert exc.code == "REQUEST_STATE"
        assert exc.context == {"state": "executing"}

    def test_context_defaults_to_empty_dict(self):
        exc = FlyRequestException("boom")
        assert exc.code is None
        assert exc.context == {}
