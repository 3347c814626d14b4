"""
Unit tests for the text normalizer and delimiter extractor.
"""

import pytest

from pagemark.capture.delimiter_extractor import DelimiterExtractor
from pagemark.capture.text_normalizer import TextNormalizer


class TestTextNormalizer:
    """Tests for TextNormalizer class."""

    @pytest.fixture
    def normalizer(self):
        return TextNormalizer()

    @pytest.mark.parametrize("raw,expected", [
        ("Hello.World", "Hello. World"),
        ("Stop!Go?Now", "Stop! Go? Now"),
        ("helloWorld", "hello World"),
        ("0range", "Orange"),
        ("n0 way", "no way"),
        ("|t was", "It was"),
    ])
    def test_single_rules(self, normalizer, raw, expected):
        assert normalizer.normalize(raw).normalized == expected

    def test_collapses_whitespace_and_newlines(self, normalizer):
        result = normalizer.normalize("  The walls\n\n were\t\tbuilt \n")

        assert result.normalized == "The walls were built"
        assert "paragraph_breaks" not in result.applied_rules

    def test_rules_apply_in_order(self, normalizer):
        # Pipe replacement runs after merged-word repair, so "a|" never splits
        assert normalizer.normalize("a|b").normalized == "aIb"
        # Zero before a letter wins over zero after a letter
        assert normalizer.normalize("a0b").normalized == "aOb"

    def test_single_pass_per_rule(self, normalizer):
        assert normalizer.normalize("aBcD").normalized == "a Bc D"

    def test_digit_runs_untouched(self, normalizer):
        assert normalizer.normalize("page 100 of 2000").normalized == "page 100 of 2000"

    def test_known_false_positive(self, normalizer):
        assert normalizer.normalize("model I0").normalized == "model Io"

    def test_empty_input(self, normalizer):
        result = normalizer.normalize("")

        assert result.normalized == ""
        assert result.was_modified is False

    def test_normalize_lines(self, normalizer):
        result = normalizer.normalize_lines(["first line", "second.Line"])

        assert result.normalized == "first line second. Line"
        assert result.applied_rules == ["collapse_whitespace", "sentence_spacing"]


class TestDelimiterExtractor:
    """Tests for DelimiterExtractor class."""

    @pytest.fixture
    def extractor(self):
        return DelimiterExtractor()

    def test_two_captures(self, extractor):
        result = extractor.extract("Intro text /capture one/ middle /capture two/ end")

        assert result.found
        assert result.text == "capture one\n\ncapture two"

    def test_non_greedy(self, extractor):
        assert extractor.extract("/a/b/c/").segments == ["a", "c"]

    def test_spans_newlines(self, extractor):
        assert extractor.extract("x /first\nline/ y").segments == ["first\nline"]

    def test_trims_and_drops_empty(self, extractor):
        result = extractor.extract("//  /   / /  kept  /")
        assert result.segments == ["kept"]

    def test_no_delimiters(self, extractor):
        result = extractor.extract("An ordinary page with no marks.")

        assert result.found is False
        assert result.segments == []

    def test_unpaired_slash(self, extractor):
        assert extractor.extract("either/or").found is False
