"""Tests for the text normalizer steps."""
import json

import pytest

from careerpath.core.recovery.normalizer import (
    TextNormalizer,
    collapse_closer_runs,
    convert_single_quotes,
    describe_decode_error,
    extract_json_span,
    fill_truncated_tail,
    insert_missing_commas,
    quote_bare_keys,
    remove_trailing_commas,
    replace_js_literals,
    strip_code_fences,
)


class TestExtraction:
    def test_strips_fences_with_language_tag(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '\n{"a": 1}\n'

    def test_strips_bare_fences(self):
        assert strip_code_fences('```\n{"a": 1}\n```').strip() == '{"a": 1}'

    def test_extracts_span_from_prose(self):
        text = 'Here you go: {"a": 1} hope it helps!'
        assert extract_json_span(text) == '{"a": 1}'

    def test_no_span_passes_through(self):
        assert extract_json_span("no json here") == "no json here"

    def test_closing_before_opening_passes_through(self):
        assert extract_json_span("a } b {") == "a } b {"


class TestSyntaxRewrites:
    def test_single_quotes_become_double(self):
        assert convert_single_quotes("{'name': 'Engineer'}") == '{"name": "Engineer"}'

    def test_double_quotes_inside_single_quoted_string_are_escaped(self):
        converted = convert_single_quotes("{'q': 'say \"hi\"'}")
        assert json.loads(converted) == {"q": 'say "hi"'}

    def test_escaped_single_quote_is_unescaped(self):
        converted = convert_single_quotes("{'q': 'it\\'s'}")
        assert json.loads(converted) == {"q": "it's"}

    def test_apostrophe_in_double_quoted_string_untouched(self):
        text = '{"note": "it\'s fine"}'
        assert convert_single_quotes(text) == text

    def test_removes_trailing_commas(self):
        assert remove_trailing_commas('{"a": [1, 2,], "b": 3,}') == '{"a": [1, 2], "b": 3}'

    def test_trailing_comma_inside_string_untouched(self):
        text = '{"a": "x,}"}'
        assert remove_trailing_commas(text) == text

    def test_quotes_bare_keys(self):
        assert quote_bare_keys('{name: "Engineer", salary: 1000}') == '{"name": "Engineer", "salary": 1000}'

    def test_bare_key_pattern_inside_string_untouched(self):
        text = '{"note": "roles, remote: yes"}'
        assert quote_bare_keys(text) == text

    def test_replaces_js_literals(self):
        assert replace_js_literals('{"a": undefined, "b": NaN}') == '{"a": null, "b": 0}'

    def test_js_literal_words_inside_strings_untouched(self):
        text = '{"a": "undefined behaviour"}'
        assert replace_js_literals(text) == text

    @pytest.mark.parametrize("text,expected", [
        ('[{"a": 1}{"b": 2}]', '[{"a": 1},{"b": 2}]'),
        ("[[1][2]]", "[[1],[2]]"),
        ('[{"a": 1}\n{"b": 2}]', '[{"a": 1},\n{"b": 2}]'),
    ])
    def test_inserts_missing_commas(self, text, expected):
        assert insert_missing_commas(text) == expected

    def test_collapses_unmatched_closers_at_end(self):
        assert collapse_closer_runs('{"a": [1, 2]}]}') == '{"a": [1, 2]}'

    def test_collapse_keeps_matched_closers(self):
        text = '{"a": [1]}'
        assert collapse_closer_runs(text) == text


class TestTruncatedTail:
    @pytest.mark.parametrize("text,expected", [
        ('{"a":', '{"a":null'),
        ('{"a": [1,', '{"a": [1,null'),
        ('{"a": [', '{"a": [null'),
        ('{"a": 1,', '{"a": 1'),
        ('{"a": {', '{"a": {'),
    ])
    def test_fills_tail(self, text, expected):
        assert fill_truncated_tail(text) == expected

    def test_complete_text_unchanged(self):
        assert fill_truncated_tail('{"a": 1}') == '{"a": 1}'

    def test_colon_inside_open_string_unchanged(self):
        text = '{"a": "ratio 1:'
        assert fill_truncated_tail(text) == text


class TestTextNormalizer:
    def setup_method(self):
        self.normalizer = TextNormalizer()

    def test_valid_json_unchanged(self):
        text = '{"a": [1, {"b": "c, d: e"}], "f": null, "g": "x}"}'
        assert self.normalizer.normalize(text) == text

    def test_unwraps_fenced_json(self):
        assert self.normalizer.normalize('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_closes_truncated_array_entry(self):
        text = '{"roles": [{"role": "Engineer", "minSalary": 1000'
        normalized = self.normalizer.normalize(text)

        assert json.loads(normalized) == {"roles": [{"role": "Engineer", "minSalary": 1000}]}

    def test_rewrite_leaves_text_unbalanced(self):
        assert self.normalizer.rewrite('{"a": [1,') == '{"a": [1,'

    def test_javascript_style_object(self):
        normalized = self.normalizer.normalize("{name: 'Engineer', salary: 1000,}")
        assert json.loads(normalized) == {"name": "Engineer", "salary": 1000}


class TestDescribeDecodeError:
    def test_returns_context_around_position(self):
        text = '{"a": 1 "b": 2}'
        with pytest.raises(json.JSONDecodeError) as exc_info:
            json.loads(text)

        snippet = describe_decode_error(text, exc_info.value, context=3)
        assert '"b' in snippet
        assert len(snippet) <= 6
