"""Tests for ContainsMatcher."""
import pytest

from switcher.matchers import ContainsMatcher, StringPart


@pytest.fixture
def matcher():
    return ContainsMatcher()


class TestContainsMatcher:
    def test_null_input(self, matcher):
        result = matcher.evaluate(None, "google")
        assert result.matched is False
        assert result.string_parts == []

    def test_null_pattern(self, matcher):
        result = matcher.evaluate("google chrome", None)
        assert result.matched is False
        assert result.string_parts == [StringPart("google chrome")]

    def test_no_match_single_part(self, matcher):
        result = matcher.evaluate("google", "chrome")
        assert result.matched is False
        assert result.score == 0
        assert result.string_parts == [StringPart("google", False)]

    def test_match_at_end(self, matcher):
        result = matcher.evaluate("google chrome", "chrome")
        assert result.matched is True
        assert result.score == 2
        assert result.string_parts == [
            StringPart("google ", False),
            StringPart("chrome", True),
        ]

    def test_match_at_beginning(self, matcher):
        result = matcher.evaluate("google chrome", "google")
        assert result.string_parts == [
            StringPart("google", True),
            StringPart(" chrome", False),
        ]

    def test_match_in_middle(self, matcher):
        result = matcher.evaluate("google chrome v28", "chrome")
        assert result.string_parts == [
            StringPart("google ", False),
            StringPart("chrome", True),
            StringPart(" v28", False),
        ]

    def test_ignores_casing(self, matcher):
        result = matcher.evaluate("Google Chrome", "CHROME")
        assert result.matched is True
        assert result.string_parts[1] == StringPart("Chrome", True)

    def test_first_occurrence_wins(self, matcher):
        result = matcher.evaluate("chrome - chrome", "chrome")
        assert result.string_parts == [
            StringPart("chrome", True),
            StringPart(" - chrome", False),
        ]

    def test_pattern_with_special_characters(self, matcher):
        result = matcher.evaluate("notes (1).txt - Notepad", "(1).")
        assert result.string_parts == [
            StringPart("notes ", False),
            StringPart("(1).", True),
            StringPart("txt - Notepad", False),
        ]
