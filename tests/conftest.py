"""Shared fixtures for tests."""
import pytest

from switcher.filterer import Candidate, WindowFilterer
from switcher.config import FilterConfig


@pytest.fixture
def sample_windows():
    """Windows as a window enumerator would hand them over, in z-order."""
    return [
        Candidate(title="Inbox - Outlook", group_label="outlook", handle="1"),
        Candidate(title="New Tab - Google Chrome", group_label="chrome", handle="2"),
        Candidate(title="Tab Manager", group_label="firefox", handle="3"),
        Candidate(title="TaskSwitcher", group_label="TaskSwitcher", handle="4"),
        Candidate(title="Visual Studio Code", group_label="Code", handle="5"),
        Candidate(title="notes.txt - Notepad", group_label="notepad", handle="6"),
    ]


@pytest.fixture
def filterer():
    """Filterer that always scores sequentially."""
    return WindowFilterer(FilterConfig(parallel_threshold=30))
