"""Matching strategies used to filter window titles."""
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Protocol, Set, Tuple, Union


@dataclass(frozen=True)
class StringPart:
    """A contiguous slice of an input string, flagged as matched or not."""
    value: str
    is_match: bool = False


@dataclass
class MatchResult:
    """Outcome of one matcher applied to one (input, pattern) pair."""
    matched: bool = False
    score: int = 0
    string_parts: List[StringPart] = field(default_factory=list)


class Matcher(Protocol):
    """Protocol shared by all matching strategies."""

    def evaluate(self, input: Optional[str], pattern: Optional[str]) -> MatchResult:
        """Match pattern against input.

        Args:
            input: Text to match against (e.g. a window title)
            pattern: What the user typed

        Returns:
            MatchResult whose string parts concatenate back to input
        """
        ...


def _non_match(input: Optional[str]) -> MatchResult:
    """Build the result returned when nothing matched."""
    result = MatchResult()
    if input is not None:
        result.string_parts.append(StringPart(input))
    return result


def _same_char(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def _first_alignment(
    length: int,
    start: int,
    candidates: Callable[[int, int], List[int]],
    failed: Union[Set[Tuple[int, int]], "_RunFailures"],
) -> Optional[List[Tuple[int, int]]]:
    """Depth-first search for the first way to place every pattern character.

    Args:
        length: Number of pattern characters
        start: Input position the first character is searched from
        candidates: candidates(k, pos) lists, most preferred first, the input
            indices where pattern character k may land when searching from pos
        failed: (k, pos) states already known to lead nowhere; updated in place

    Returns:
        One (search_start, index) pair per pattern character, or None
    """
    if length == 0:
        return []
    if (0, start) in failed:
        return None

    path: List[Tuple[int, int]] = []
    stack = [(0, start, iter(candidates(0, start)))]

    while stack:
        k, pos, options = stack[-1]
        index = next(options, None)

        if index is None:
            failed.add((k, pos))
            stack.pop()
            if path:
                path.pop()
            continue

        if k + 1 == length:
            return path + [(pos, index)]

        if (k + 1, index + 1) in failed:
            continue

        path.append((pos, index))
        stack.append((k + 1, index + 1, iter(candidates(k + 1, index + 1))))

    return None


class StartsWithMatcher:
    """Matches when the input begins with the pattern."""

    SCORE = 4

    def evaluate(self, input: Optional[str], pattern: Optional[str]) -> MatchResult:
        if input is None:
            return MatchResult()

        if pattern is None or not self._starts_with(input, pattern):
            return _non_match(input)

        return MatchResult(
            matched=True,
            score=self.SCORE,
            string_parts=[
                StringPart(input[:len(pattern)], True),
                StringPart(input[len(pattern):], False),
            ],
        )

    def _starts_with(self, input: str, pattern: str) -> bool:
        if len(pattern) > len(input):
            return False
        return all(_same_char(a, b) for a, b in zip(input, pattern))


class ContainsMatcher:
    """Matches when the pattern occurs anywhere in the input."""

    SCORE = 2

    def evaluate(self, input: Optional[str], pattern: Optional[str]) -> MatchResult:
        if input is None or pattern is None:
            return _non_match(input)

        index = self._find(input, pattern)
        if index < 0:
            return _non_match(input)

        end = index + len(pattern)
        pieces = [
            StringPart(input[:index]),
            StringPart(input[index:end], True),
            StringPart(input[end:]),
        ]

        return MatchResult(
            matched=True,
            score=self.SCORE,
            string_parts=[part for part in pieces if part.value],
        )

    def _find(self, input: str, pattern: str) -> int:
        """Index of the first case-insensitive occurrence, or -1."""
        folded_input = [c.lower() for c in input]
        folded_pattern = [c.lower() for c in pattern]
        size = len(folded_pattern)

        for start in range(len(folded_input) - size + 1):
            if folded_input[start:start + size] == folded_pattern:
                return start

        return -1


def _is_word_char(c: str) -> bool:
    return c.isalnum() or c == "_"


def _at_word_boundary(input: str, index: int) -> bool:
    before = index > 0 and _is_word_char(input[index - 1])
    return before != _is_word_char(input[index])


class _RunFailures:
    """Failed (k, pos) states, widened to the rest of pos's filler run.

    From a later position in the same run the scan can only reach a subset
    of the indices reachable from pos, so those states fail as well.
    """

    def __init__(self, run_end: List[int]):
        self._run_end = run_end
        # (k, run end) -> smallest position known to fail
        self._first: Dict[Tuple[int, int], int] = {}

    def __contains__(self, state: Tuple[int, int]) -> bool:
        k, pos = state
        first = self._first.get((k, self._run_end[pos]))
        return first is not None and pos >= first

    def add(self, state: Tuple[int, int]) -> None:
        k, pos = state
        key = (k, self._run_end[pos])
        if pos < self._first.get(key, pos + 1):
            self._first[key] = pos


class SignificantCharactersMatcher:
    """Matches pattern characters against capitals and word starts.

    Every pattern character must be found, in order, either as the upper-case
    letter anywhere or as the lower-case letter at the start of a word. Between
    two matched characters only lower-case text may be skipped, optionally
    ending in a single whitespace character, so "ts" matches "TaskSwitcher"
    and "gc" matches "google chrome" but "gc" does not match "gecko".
    """

    SCORE = 2

    # cleared when full, a plan is cheap to rebuild
    MAX_PLANS = 256

    # pattern -> (lower, upper) per character; shared by filter threads
    _plans: Dict[str, Tuple[Tuple[str, str], ...]] = {}
    _plans_lock = threading.Lock()

    def evaluate(self, input: Optional[str], pattern: Optional[str]) -> MatchResult:
        if input is None or pattern is None:
            return _non_match(input)

        plan = self._get_plan(pattern)
        found = self._scan(input, plan)
        if found is None:
            return _non_match(input)

        start, pairs = found
        end = pairs[-1][1] + 1 if pairs else start

        parts = [StringPart(input[:start])]
        for filler_start, index in pairs:
            if index > filler_start:
                parts.append(StringPart(input[filler_start:index]))
            parts.append(StringPart(input[index], True))
        parts.append(StringPart(input[end:]))

        return MatchResult(matched=True, score=self.SCORE, string_parts=parts)

    @classmethod
    def _get_plan(cls, pattern: str) -> Tuple[Tuple[str, str], ...]:
        with cls._plans_lock:
            plan = cls._plans.get(pattern)
            if plan is None:
                if len(cls._plans) >= cls.MAX_PLANS:
                    cls._plans.clear()
                plan = tuple((p.lower(), p.upper()) for p in pattern)
                cls._plans[pattern] = plan
            return plan

    @classmethod
    def clear_cache(cls) -> None:
        """Drop all cached scan plans."""
        with cls._plans_lock:
            cls._plans.clear()

    def _scan(
        self, input: str, plan: Tuple[Tuple[str, str], ...]
    ) -> Optional[Tuple[int, List[Tuple[int, int]]]]:
        """Find the leftmost alignment of plan in input.

        Each (k, pos) state offers at most three indices: the first target
        inside the filler run, the target right after a closing whitespace,
        and the capital or whitespace that closes the run. Later targets in
        the same run lead to states covered by the failure of the first one.

        Args:
            input: Text to scan
            plan: (lower, upper) pair per pattern character

        Returns:
            (start, [(filler_start, index), ...]) or None
        """
        size = len(input)

        def is_target(index: int, lower: str, upper: str) -> bool:
            c = input[index]
            if c == upper:
                return True
            return c == lower and _at_word_boundary(input, index)

        # run_end[i]: first capital or whitespace at or after i
        run_end = [size] * (size + 1)
        for i in range(size - 1, -1, -1):
            c = input[i]
            run_end[i] = i if c.isupper() or c.isspace() else run_end[i + 1]

        # next_target[k][i]: first index at or after i where character k fits
        next_target = []
        for lower, upper in plan:
            following = [size] * (size + 1)
            for i in range(size - 1, -1, -1):
                following[i] = i if is_target(i, lower, upper) else following[i + 1]
            next_target.append(following)

        def candidates(k: int, pos: int) -> List[int]:
            lower, upper = plan[k]
            stop = run_end[pos]

            # shortest filler first; a trailing whitespace is consumed
            # before it is left out
            found = []
            index = next_target[k][pos]
            if index < stop:
                found.append(index)
            if stop < size:
                if input[stop].isspace() and stop + 1 < size and is_target(stop + 1, lower, upper):
                    found.append(stop + 1)
                if is_target(stop, lower, upper):
                    found.append(stop)
            return found

        failed = _RunFailures(run_end)
        for start in range(size + 1):
            pairs = _first_alignment(len(plan), start, candidates, failed)
            if pairs is not None:
                return start, pairs

        return None


class IndividualCharactersMatcher:
    """Matches when the pattern characters appear in order, with gaps."""

    SCORE = 1

    def evaluate(self, input: Optional[str], pattern: Optional[str]) -> MatchResult:
        if input is None or pattern is None:
            return _non_match(input)

        pairs = self._scan(input, pattern)
        if pairs is None:
            return _non_match(input)

        parts = []
        previous = 0
        for _, index in pairs:
            if index > previous:
                parts.append(StringPart(input[previous:index]))
            parts.append(StringPart(input[index], True))
            previous = index + 1
        if previous < len(input):
            parts.append(StringPart(input[previous:]))

        return MatchResult(matched=True, score=self.SCORE, string_parts=parts)

    def _scan(self, input: str, pattern: str) -> Optional[List[Tuple[int, int]]]:
        """Locate each pattern character in order.

        The gap before a pattern character may not contain the previous
        pattern character, so each match sits as close as possible to the
        next one.
        """

        def candidates(k: int, pos: int) -> List[int]:
            found = []
            for index in range(pos, len(input)):
                if _same_char(input[index], pattern[k]):
                    found.append(index)
                if k > 0 and _same_char(input[index], pattern[k - 1]):
                    break
            return found

        return _first_alignment(len(pattern), 0, candidates, set())


def default_matchers() -> List[Matcher]:
    """Return the matchers in the order they are applied.

    Returns:
        StartsWith, SignificantCharacters, Contains, IndividualCharacters
    """
    return [
        StartsWithMatcher(),
        SignificantCharactersMatcher(),
        ContainsMatcher(),
        IndividualCharactersMatcher(),
    ]
