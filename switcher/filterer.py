"""Filter and rank windows against a user query."""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Generic, List, Optional, Protocol, Sequence, Tuple, TypeVar

from switcher.config import FilterConfig
from switcher.highlighter import XamlHighlighter
from switcher.matchers import Matcher, MatchResult, default_matchers
from switcher.query import parse_query


class WindowText(Protocol):
    """Anything with a title and a group label can be filtered."""
    title: Optional[str]
    group_label: Optional[str]


T = TypeVar("T", bound=WindowText)


@dataclass(frozen=True)
class Candidate:
    """A window offered for filtering.

    handle is an opaque identifier the caller uses to find the window again.
    """
    title: Optional[str]
    group_label: Optional[str]
    handle: Optional[str] = None


@dataclass
class FilterResult(Generic[T]):
    """A window that passed the filter, with the match results for both fields."""
    candidate: T
    title_match_results: List[MatchResult] = field(default_factory=list)
    group_match_results: List[MatchResult] = field(default_factory=list)

    @property
    def score(self) -> int:
        """Sum of the scores of every matcher that matched either field."""
        results = self.title_match_results + self.group_match_results
        return sum(r.score for r in results if r.matched)

    def formatted_title(self, highlighter: Optional[XamlHighlighter] = None) -> str:
        return (highlighter or XamlHighlighter()).highlight_best(self.title_match_results)

    def formatted_group(self, highlighter: Optional[XamlHighlighter] = None) -> str:
        return (highlighter or XamlHighlighter()).highlight_best(self.group_match_results)


@dataclass
class WindowFilterContext(Generic[T]):
    """Windows to filter plus the process of the foreground window.

    foreground_group replaces an empty group prefix, so ".tab" searches the
    windows of whatever application is currently active.
    """
    windows: Sequence[T]
    foreground_group: Optional[str] = None


class WindowFilterer:
    """Runs every matcher over every window and ranks the survivors."""

    def __init__(
        self,
        config: Optional[FilterConfig] = None,
        matchers: Optional[List[Matcher]] = None,
    ):
        """Initialize the filterer.

        Args:
            config: Parallelism settings. Defaults to FilterConfig()
            matchers: Matchers in the order they are applied. Defaults to
                default_matchers()
        """
        self.config = config or FilterConfig()
        self.matchers = matchers if matchers is not None else default_matchers()

    def score(self, text: Optional[str], pattern: Optional[str]) -> List[MatchResult]:
        """Evaluate text against pattern with every matcher.

        Args:
            text: Window title or group label
            pattern: Filter text

        Returns:
            One MatchResult per matcher, in matcher order
        """
        return [matcher.evaluate(text, pattern) for matcher in self.matchers]

    def filter(
        self,
        context: WindowFilterContext[T],
        query: Optional[str],
        limit: Optional[int] = None,
    ) -> List[FilterResult[T]]:
        """Parse a raw query and filter the context's windows with it.

        Args:
            context: Windows and foreground group
            query: Raw query, optionally prefixed with "group."
            limit: Maximum number of results to return

        Returns:
            Matching windows, best first
        """
        parsed = parse_query(query, context.foreground_group)
        return self.filter_candidates(
            context.windows, parsed.text_filter, parsed.group_filter, limit=limit
        )

    def filter_candidates(
        self,
        candidates: Sequence[T],
        text_filter: Optional[str],
        group_filter: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[FilterResult[T]]:
        """Filter and rank candidates.

        Without a group filter a window is kept when its title or its group
        label matches the text filter. With a group filter the title must match
        the text filter and the group label must match the group filter.

        Args:
            candidates: Windows to filter, in their original order
            text_filter: Pattern for the title (and the group label when
                group_filter is None)
            group_filter: Pattern for the group label
            limit: Maximum number of results to return

        Returns:
            Matching windows sorted by descending score; ties keep input order
        """
        if not candidates:
            return []

        def evaluate(candidate: T) -> Tuple[FilterResult[T], bool]:
            title_results = self.score(candidate.title, text_filter)
            group_results = self.score(
                candidate.group_label,
                group_filter if group_filter is not None else text_filter,
            )

            title_matched = any(r.matched for r in title_results)
            group_matched = any(r.matched for r in group_results)
            if group_filter is None:
                included = title_matched or group_matched
            else:
                included = title_matched and group_matched

            return FilterResult(candidate, title_results, group_results), included

        if len(candidates) < self.config.parallel_threshold:
            evaluated = [evaluate(c) for c in candidates]
        else:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                evaluated = list(executor.map(evaluate, candidates))

        # sorted() is stable, equal scores keep their input order
        results = sorted(
            (result for result, included in evaluated if included),
            key=lambda r: r.score,
            reverse=True,
        )

        if limit is not None and limit >= 0:
            results = results[:limit]

        return results
