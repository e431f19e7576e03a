#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""Tests for thread models, preview derivation, and the open-thread reference."""

import pytest

from threadpanel.models import (
    DEFAULT_WIDTH,
    MAX_WIDTH,
    MIN_WIDTH,
    OpenThreadRef,
    ThreadSummary,
    content_to_string,
    derive_preview,
)


class TestConstants:
    def test_width_bounds_are_ordered(self):
        assert MIN_WIDTH < DEFAULT_WIDTH < MAX_WIDTH


class TestContentToString:
    def test_string_content_returned_unchanged(self):
        assert content_to_string("hello") == "hello"

    def test_text_blocks_joined_with_space(self):
        content = [
            {"type": "text", "text": "first"},
            {"type": "image_url", "image_url": "x.png"},
            {"type": "text", "text": "second"},
        ]
        assert content_to_string(content) == "first second"

    def test_non_text_content_is_empty(self):
        assert content_to_string(None) == ""
        assert content_to_string(42) == ""
        assert content_to_string([{"type": "image_url"}]) == ""


class TestDerivePreview:
    def test_uses_first_message_content(self):
        values = {"messages": [{"content": "How do I bake bread?"}, {"content": "Reply"}]}
        assert derive_preview("t1", values) == "How do I bake bread?"

    @pytest.mark.parametrize(
        "values",
        [None, "not a dict", {}, {"messages": []}, {"messages": "nope"}, {"messages": ["raw"]}],
    )
    def test_falls_back_to_thread_id(self, values):
        """Missing or malformed message payloads fall back to the id."""
        assert derive_preview("thread-42", values) == "thread-42"

    def test_block_content_is_flattened(self):
        values = {"messages": [{"content": [{"type": "text", "text": "Block text"}]}]}
        assert derive_preview("t1", values) == "Block text"


class TestThreadSummary:
    def test_is_immutable(self):
        thread = ThreadSummary(id="a", preview_text="x")
        with pytest.raises(Exception):
            thread.id = "b"  # type: ignore[misc]


class TestOpenThreadRef:
    def test_defaults_to_absent(self):
        assert OpenThreadRef().get() is None

    def test_set_and_clear_notify_listeners(self):
        ref = OpenThreadRef()
        seen = []
        ref.subscribe(seen.append)

        ref.set("a")
        ref.clear()

        assert seen == ["a", None]
        assert ref.get() is None

    def test_setting_same_value_does_not_notify(self):
        ref = OpenThreadRef("a")
        seen = []
        ref.subscribe(seen.append)

        ref.set("a")

        assert seen == []

    def test_unsubscribe_stops_notifications(self):
        ref = OpenThreadRef()
        seen = []
        unsubscribe = ref.subscribe(seen.append)
        unsubscribe()

        ref.set("b")

        assert seen == []
