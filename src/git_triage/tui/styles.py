"""Styles for the git-triage TUI.

The frame is drawn as a single rich Text, so most styling lives in the
palette below rather than in CSS.
"""

from typing import Dict, Optional, Tuple

from git_triage.changeset import StatusCode

APP_CSS = """
Screen {
    overflow: hidden;
    background: $background;
}

#frame {
    width: 100%;
    height: 100%;
    padding: 0;
}
"""

# Header
BRANCH_STYLE = "blue"
REF_STYLE = "cyan"
DETACHED_REF_STYLE = "yellow"

# Body
CURSOR_STYLE = "magenta"
DISCARD_STYLE = "bright_black"
SEPARATOR_STYLE = "#808080"

# Footer
HELP_STYLE = "#808080"

SCROLLBAR_THUMB = "█"

# (staged, status) -> style; missing combinations render unstyled
STATUS_STYLES: Dict[Tuple[bool, StatusCode], str] = {
    (True, StatusCode.ADDED): "green",
    (True, StatusCode.DELETED): "red",
    (True, StatusCode.MODIFIED): "green",
    (True, StatusCode.RENAMED): "yellow",
    (True, StatusCode.UNMERGED): "green",
    (False, StatusCode.ADDED): "red",
    (False, StatusCode.DELETED): "red",
    (False, StatusCode.MODIFIED): "red",
    (False, StatusCode.RENAMED): "yellow",
    (False, StatusCode.UNMERGED): "yellow",
    (False, StatusCode.UNTRACKED): "red",
}


def status_style(status: StatusCode, staged: bool) -> Optional[str]:
    """Colour for an entry's text given its status letter and index side."""
    return STATUS_STYLES.get((staged, status))
