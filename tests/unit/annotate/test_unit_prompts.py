# tests/unit/annotate/test_unit_prompts.py - v1
"""Tests for annotate/prompts.py."""

from __future__ import annotations

from presetindex.annotate.prompts import SYSTEM_PROMPT, render_user_prompt


class TestPrompts:
    def test_system_prompt_requests_all_fields(self):
        for key in ('"rating"', '"description"', '"tags"'):
            assert key in SYSTEM_PROMPT

    def test_render_embeds_raw_text(self):
        rendered = render_user_prompt("name: 小明")
        assert "name: 小明" in rendered
        assert "{prompt}" not in rendered
