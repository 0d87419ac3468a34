"""Shared fixtures for git-triage tests."""

from typing import List

import pytest

from git_triage.changeset import (
    Category,
    ChangeSet,
    Entry,
    HeadInfo,
    StatusCode,
)

MAIN_REF = "abc1234def5678901234567890abcdef12345678"


@pytest.fixture
def main_head() -> HeadInfo:
    """HEAD on branch main."""
    return HeadInfo(branch="main", ref=MAIN_REF)


@pytest.fixture
def sample_entries() -> List[Entry]:
    """One staged, one unstaged and one untracked file."""
    return [
        Entry(Category.STAGED, "a.txt", StatusCode.MODIFIED, staged=True),
        Entry(Category.UNSTAGED, "b.txt", StatusCode.MODIFIED),
        Entry(Category.UNTRACKED, "c.txt", StatusCode.UNTRACKED),
    ]


@pytest.fixture
def sample_changeset(sample_entries, main_head) -> ChangeSet:
    """Change set built from sample_entries."""
    return ChangeSet(entries=tuple(sample_entries), head=main_head)


@pytest.fixture
def long_changeset(main_head) -> ChangeSet:
    """Forty unstaged files, enough to need scrolling."""
    entries = tuple(
        Entry(Category.UNSTAGED, f"src/module_{i:02d}.py", StatusCode.MODIFIED)
        for i in range(40)
    )
    return ChangeSet(entries=entries, head=main_head, ahead=2, behind=1)
