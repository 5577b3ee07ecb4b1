"""Tests for JSON response parsing"""

from typing import Dict, List

import pytest

from nano_creator.core.exceptions import ParseError
from nano_creator.models import CardNewsPayload
from nano_creator.services.infrastructure.parsing import (
    parse_json_strict,
    unwrap_code_fence,
    validate_payload,
)


class TestUnwrapCodeFence:
    def test_json_fence(self):
        assert unwrap_code_fence('```json\n["a", "b"]\n```') == '["a", "b"]'

    def test_bare_fence(self):
        assert unwrap_code_fence('Here you go:\n```\n{"k": 1}\n```\nThanks') == '{"k": 1}'

    def test_no_fence(self):
        assert unwrap_code_fence('  {"k": 1} ') == '{"k": 1}'

    def test_empty(self):
        assert unwrap_code_fence("") == ""


class TestParseJsonStrict:
    def test_valid(self):
        result = parse_json_strict('```json\n{"a": [1, 2]}\n```')
        assert result.ok
        assert result.unwrap() == {"a": [1, 2]}

    def test_invalid_does_not_repair(self):
        result = parse_json_strict('{"a": 1,}')
        assert not result.ok
        assert isinstance(result.error, ParseError)
        assert result.error.raw == '{"a": 1,}'
        with pytest.raises(ParseError):
            result.unwrap()

    def test_empty(self):
        assert not parse_json_strict("   ").ok


class TestValidatePayload:
    def test_list_of_strings(self):
        assert validate_payload('["농구", "리바운드"]', List[str]).unwrap() == ["농구", "리바운드"]

    def test_strict_rejects_coercion(self):
        result = validate_payload("[1, 2]", List[str], what="keywords")
        assert not result.ok
        assert "keywords" in result.error.message

    def test_mapping(self):
        assert validate_payload('{"a": "b"}', Dict[str, str]).unwrap() == {"a": "b"}

    def test_model(self):
        text = '{"cards": [{"title": "T", "content": "C", "image_prompt": "P"}]}'
        payload = validate_payload(text, CardNewsPayload).unwrap()
        assert payload.cards[0].title == "T"

    def test_model_shape_mismatch(self):
        result = validate_payload('{"cards": [{"title": "T"}]}', CardNewsPayload, what="card news")
        assert not result.ok
        assert "card news" in result.error.message

    def test_decode_error_passes_through(self):
        assert not validate_payload("not json", List[str]).ok
