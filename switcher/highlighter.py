"""Render matched string parts as XAML markup."""
from typing import Iterable, Optional, Sequence
from markupsafe import escape

from switcher.matchers import MatchResult, StringPart


DEFAULT_TAG = "Bold"

# element text only needs &, < and > escaped; quotes stay literal
_QUOTE_ENTITIES = (("&#34;", '"'), ("&#39;", "'"))


def escape_text(value: str) -> str:
    """Escape a string for use as XML element text."""
    text = str(escape(value))
    for entity, quote in _QUOTE_ENTITIES:
        text = text.replace(entity, quote)
    return text


class XamlHighlighter:
    """Wraps matched parts in an emphasis element and escapes everything else."""

    def __init__(self, tag: str = DEFAULT_TAG):
        self.tag = tag

    def highlight(self, string_parts: Optional[Iterable[StringPart]]) -> str:
        """Build markup for a sequence of string parts.

        Args:
            string_parts: Parts as produced by a matcher, in order

        Returns:
            Markup string, e.g. "<Bold>test &gt; test-1</Bold>test"
        """
        if string_parts is None:
            return ""

        chunks = []
        for part in string_parts:
            text = escape_text(part.value)
            if part.is_match:
                chunks.append(f"<{self.tag}>{text}</{self.tag}>")
            else:
                chunks.append(text)

        return "".join(chunks)

    def highlight_best(self, match_results: Sequence[MatchResult]) -> str:
        """Highlight the first matched result, falling back to the first one.

        Args:
            match_results: Results of all matchers for one text, in matcher order

        Returns:
            Markup for the preferred result, or "" when there are no results
        """
        if not match_results:
            return ""

        best = next((r for r in match_results if r.matched), match_results[0])
        return self.highlight(best.string_parts)
