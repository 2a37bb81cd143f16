# tests/unit/logging/test_unit_context.py - v2
"""Tests for logging/context.py."""

from __future__ import annotations

from presetindex.logging.context import (
    clear_context,
    get_context,
    set_preset_context,
    set_run_context,
)


class TestLogContext:
    def teardown_method(self):
        clear_context()

    def test_empty_by_default(self):
        clear_context()
        assert get_context().as_dict() == {}

    def test_set_and_clear(self):
        set_run_context("r1")
        set_preset_context("p1")
        assert get_context().as_dict() == {"run_id": "r1", "preset": "p1"}
        clear_context()
        assert get_context().run_id is None
