"""Base fixtures for TUI integration tests."""

import pytest

from git_triage.tui.app import StatusApp
from git_triage.viewport import ScrollMode


@pytest.fixture
def status_app(sample_changeset) -> StatusApp:
    """App over one staged, one unstaged and one untracked file."""
    return StatusApp(sample_changeset)


@pytest.fixture
def long_status_app(long_changeset) -> StatusApp:
    """App over a list that needs scrolling."""
    return StatusApp(long_changeset, scroll_mode=ScrollMode.PROPORTIONAL)
