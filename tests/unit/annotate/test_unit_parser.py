# tests/unit/annotate/test_unit_parser.py - v1
"""Tests for annotate/parser.py - layered recovery of the annotation object."""

from __future__ import annotations

import json

import pytest

from presetindex.annotate.models import GenerationError
from presetindex.annotate.parser import extract_json_object, parse_annotation


@pytest.fixture
def payload() -> dict:
    return {"rating": 3.8, "description": "一位冷静的AI助手。", "tags": ["助手", "AI"]}


class TestFallbackChain:
    def test_clean_fenced_and_braced_parse_identically(self, payload):
        raw = json.dumps(payload, ensure_ascii=False)
        clean = raw
        fenced = f"好的，下面是分析报告：\n```json\n{raw}\n```\n希望对你有帮助。"
        braced = f"分析结果 {raw} 以上。"

        results = [parse_annotation(t) for t in (clean, fenced, braced)]
        assert results[0] == results[1] == results[2]
        assert results[0].rating == 3.8
        assert results[0].tags == ["助手", "AI"]

    def test_uppercase_fence_label(self, payload):
        text = "```JSON\n" + json.dumps(payload) + "\n```"
        assert parse_annotation(text).description == payload["description"]

    def test_non_object_json_falls_through(self, payload):
        # The whole reply is valid JSON but a list; the braces span still yields the object.
        text = f'["note", {json.dumps(payload)}]'
        assert extract_json_object(text) == payload

    def test_scalar_reply_without_braces(self):
        assert extract_json_object("42") is None

    def test_nothing_recoverable(self):
        assert extract_json_object("no json here") is None
        with pytest.raises(GenerationError, match="No JSON object"):
            parse_annotation("no json here")

    def test_partial_object_rejected(self):
        with pytest.raises(GenerationError):
            parse_annotation('[{"rating": 1}]x')


class TestValidation:
    def test_zero_rating_is_valid(self):
        annotation = parse_annotation('{"rating": 0, "description": "d", "tags": ["t"]}')
        assert annotation.rating == 0

    def test_string_rating_coerced(self):
        annotation = parse_annotation('{"rating": "4.5", "description": "d", "tags": ["t"]}')
        assert annotation.rating == 4.5

    @pytest.mark.parametrize(
        "body",
        [
            '{"description": "d", "tags": ["t"]}',
            '{"rating": 4, "description": "", "tags": ["t"]}',
            '{"rating": 4, "description": "d", "tags": []}',
            '{"rating": 9, "description": "d", "tags": ["t"]}',
            '{"rating": 4, "description": "   ", "tags": ["t"]}',
        ],
    )
    def test_semantically_empty_payload_rejected(self, body):
        with pytest.raises(GenerationError, match="Invalid annotation payload"):
            parse_annotation(body)
