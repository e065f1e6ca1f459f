"""Properties shared by every matcher."""
import pytest

from switcher.matchers import (
    ContainsMatcher,
    IndividualCharactersMatcher,
    SignificantCharactersMatcher,
    StartsWithMatcher,
    StringPart,
    default_matchers,
)


MATCHERS = [
    StartsWithMatcher(),
    SignificantCharactersMatcher(),
    ContainsMatcher(),
    IndividualCharactersMatcher(),
]

INPUTS = [
    "",
    "google chrome",
    "Google Chrome v28",
    "TaskSwitcher",
    "Visual Studio Code",
    "notes.txt - Notepad",
    "a <b> & c",
    "İstanbul - Maps",
]

PATTERNS = ["", "g", "gc", "chrome", "TS", "vsc", "x", ".", "<b>", "ist", "zzz"]


@pytest.fixture(params=MATCHERS, ids=lambda m: type(m).__name__)
def matcher(request):
    return request.param


class TestRoundTrip:
    @pytest.mark.parametrize("input", INPUTS)
    def test_parts_rebuild_input(self, matcher, input):
        for pattern in PATTERNS + [None]:
            result = matcher.evaluate(input, pattern)
            assert "".join(p.value for p in result.string_parts) == input, pattern


class TestNullHandling:
    def test_null_input(self, matcher):
        result = matcher.evaluate(None, "anything")
        assert result.matched is False
        assert result.score == 0
        assert result.string_parts == []

    def test_null_input_and_pattern(self, matcher):
        result = matcher.evaluate(None, None)
        assert result.matched is False
        assert result.string_parts == []

    def test_null_pattern(self, matcher):
        result = matcher.evaluate("Inbox - Outlook", None)
        assert result.matched is False
        assert result.score == 0
        assert result.string_parts == [StringPart("Inbox - Outlook", False)]


class TestCaseInsensitivity:
    @pytest.mark.parametrize("pattern", ["vsc", "VSC", "vSc"])
    def test_pattern_case_does_not_change_outcome(self, matcher, pattern):
        reference = matcher.evaluate("Visual Studio Code", "vsc")
        result = matcher.evaluate("Visual Studio Code", pattern)
        assert result == reference

    def test_matched_parts_keep_input_casing(self, matcher):
        result = matcher.evaluate("TaskSwitcher", "t")
        matched = "".join(p.value for p in result.string_parts if p.is_match)
        assert matched == "T"

    def test_non_match_has_zero_score(self, matcher):
        result = matcher.evaluate("Inbox", "zzz")
        assert result.matched is False
        assert result.score == 0


class TestDefaultMatchers:
    def test_order(self):
        names = [type(m).__name__ for m in default_matchers()]
        assert names == [
            "StartsWithMatcher",
            "SignificantCharactersMatcher",
            "ContainsMatcher",
            "IndividualCharactersMatcher",
        ]

    def test_scores(self):
        scores = [m.evaluate("chrome", "c").score for m in default_matchers()]
        assert scores == [4, 2, 2, 1]

    def test_input_is_not_mutated(self):
        title = "Google Chrome"
        for m in default_matchers():
            m.evaluate(title, "chrome")
        assert title == "Google Chrome"
