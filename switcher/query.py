"""Query parsing: optional group prefix before the first dot."""
from dataclasses import dataclass
from typing import Optional


GROUP_SEPARATOR = "."


@dataclass(frozen=True)
class Query:
    """A raw query split into the title filter and an optional group filter.

    A group_filter of None means the text filter is matched against both the
    title and the group label.
    """
    text_filter: Optional[str]
    group_filter: Optional[str] = None


def parse_query(raw: Optional[str], fallback_group: Optional[str] = None) -> Query:
    """Split a raw query on its first dot.

    "chrome.tab" scopes "tab" to the "chrome" group; ".tab" scopes it to the
    fallback group (the foreground window's process). Only the first dot is
    significant, later ones belong to the text filter.

    Args:
        raw: What the user typed
        fallback_group: Group used when the group prefix is empty

    Returns:
        Parsed Query
    """
    if raw is None:
        return Query(text_filter=None)

    group, separator, text = raw.partition(GROUP_SEPARATOR)
    if not separator:
        return Query(text_filter=raw)

    if not group:
        group = fallback_group

    return Query(text_filter=text, group_filter=group)
