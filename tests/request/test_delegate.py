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
"""Tests for the one-shot completion slot."""

from __future__ import annotations

from flyrequest.request.delegate import OneShotCompletion


def handler(request, error):
    raise AssertionError("handler must not be invoked by the slot")


class TestOneShotCompletion:
    def test_empty_slot_is_not_pending(self):
        slot = OneShotCompletion()
        assert not slot.pending
        assert slot.take() is None

    def test_take_hands_out_handler_once(self):
        slot = OneShotCompletion()
        slot.set(handler)
        assert slot.pending

        assert slot.take() is handler
        assert not slot.pending
        assert slot.take() is None

    def test_release_drops_handler_without_calling_it(self):
        slot = OneShotCompletion(handler)
        assert slot.pending

        slot.release()

        assert not slot.pending
        assert slot.take() is None

    def test_set_none_clears_slot(self):
        slot = OneShotCompletion(handler)
        slot.set(None)
        assert not slot.pending
