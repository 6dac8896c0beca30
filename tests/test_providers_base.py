"""
Tests for providers/base.py - JSON span location and response parsing.

Covers:
  - find_json_object: prose around the object, nested objects, braces in strings
  - parse_json_response: InvalidResponseFormat vs MalformedJson, raw text kept
  - detect_mime: magic-byte sniffing
"""
from __future__ import annotations

import pytest

from providers.base import (
    ATTRIBUTES_PROMPT, FOOTPRINT_PROMPT, GenerativeResponseError, InvalidResponseFormat,
    MalformedJson, detect_mime, find_json_object, parse_json_response,
)


class TestFindJsonObject:
    def test_plain_object(self):
        assert find_json_object('{"a": 1}') == '{"a": 1}'

    def test_prose_and_markdown_fences_around(self):
        text = 'Sure! Here it is:\n```json\n{"name": "Soap"}\n```\nHope that helps.'
        assert find_json_object(text) == '{"name": "Soap"}'

    def test_nested_object_is_kept_whole(self):
        text = '{"packaging": {"materials": ["glass"], "recyclable": true}} trailing'
        assert find_json_object(text) == '{"packaging": {"materials": ["glass"], "recyclable": true}}'

    def test_first_of_two_objects(self):
        assert find_json_object('{"a": 1} and {"b": 2}') == '{"a": 1}'

    def test_braces_inside_strings_ignored(self):
        text = '{"note": "use } carefully \\" {", "x": 1} tail }'
        assert find_json_object(text) == '{"note": "use } carefully \\" {", "x": 1}'

    def test_no_braces(self):
        assert find_json_object("I cannot identify this product.") is None

    def test_unclosed_object(self):
        assert find_json_object('{"a": {"b": 1') is None

    def test_stray_open_brace_before_object_is_skipped(self):
        text = 'Sure {here is the result: {"ingredients": ["Water"], "packaging": {"recyclable": true}}'
        assert find_json_object(text) == '{"ingredients": ["Water"], "packaging": {"recyclable": true}}'

    def test_inner_object_of_unclosed_outer_is_found(self):
        assert find_json_object('{"a": {"b": 1}') == '{"b": 1}'


class TestParseJsonResponse:
    def test_parses_object(self):
        data = parse_json_response('Result: {"name": "Soap", "brand": "Acme"}', "test")
        assert data == {"name": "Soap", "brand": "Acme"}

    def test_no_object_raises_invalid_response_format(self):
        raw = "I'm sorry, I can't help with that."
        with pytest.raises(InvalidResponseFormat) as excinfo:
            parse_json_response(raw, "test")
        assert excinfo.value.raw == raw

    def test_bad_json_raises_malformed_json_with_raw(self):
        raw = "{name: 'Soap'}"
        with pytest.raises(MalformedJson, match="JSON parse error") as excinfo:
            parse_json_response(raw, "test")
        assert excinfo.value.raw == raw

    def test_both_errors_are_value_errors(self):
        assert issubclass(InvalidResponseFormat, GenerativeResponseError)
        assert issubclass(MalformedJson, GenerativeResponseError)
        assert issubclass(GenerativeResponseError, ValueError)

    def test_object_after_stray_brace_parses(self):
        data = parse_json_response('Result {see below: {"name": "Soap"}', "test")
        assert data == {"name": "Soap"}

    def test_empty_text(self):
        with pytest.raises(InvalidResponseFormat):
            parse_json_response("", "test")


class TestPrompts:
    def test_attributes_prompt_names_the_shape(self):
        assert '"ingredients"' in ATTRIBUTES_PROMPT
        assert '"recyclable"' in ATTRIBUTES_PROMPT

    def test_footprint_prompt_formats(self):
        text = FOOTPRINT_PROMPT.format(ingredients="Water", materials="glass", recyclable="true")
        assert "Ingredients: Water" in text
        assert '"score": number' in text


class TestDetectMime:
    def test_png(self):
        assert detect_mime(b"\x89PNG\r\n\x1a\n....") == "image/png"

    def test_gif(self):
        assert detect_mime(b"GIF89a....") == "image/gif"

    def test_webp(self):
        assert detect_mime(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == "image/webp"

    def test_default_jpeg(self):
        assert detect_mime(b"\xff\xd8\xff\xe0") == "image/jpeg"
