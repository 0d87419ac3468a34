"""Viewport and scrollbar geometry for the picker body."""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

SCROLLBAR_THUMB_HEIGHT = 2


class ScrollMode(Enum):
    """How the selected row is brought into view."""

    PROPORTIONAL = "proportional"
    EXACT = "exact"


@dataclass(frozen=True)
class Viewport:
    """Visible window over the rendered body lines."""

    width: int = 0
    height: int = 0
    y_offset: int = 0
    total_lines: int = 0

    @property
    def max_y_offset(self) -> int:
        return max(0, self.total_lines - self.height)

    @property
    def content_fits(self) -> bool:
        """True when every body line is visible at once."""
        return self.total_lines <= self.height

    def set_y_offset(self, offset: int) -> "Viewport":
        return replace(self, y_offset=min(max(offset, 0), self.max_y_offset))

    def goto_top(self) -> "Viewport":
        return replace(self, y_offset=0)

    def goto_bottom(self) -> "Viewport":
        return replace(self, y_offset=self.max_y_offset)

    def resize(self, width: int, height: int) -> "Viewport":
        return replace(self, width=width, height=max(0, height)).set_y_offset(
            self.y_offset
        )

    def with_content(self, total_lines: int) -> "Viewport":
        return replace(self, total_lines=total_lines).set_y_offset(self.y_offset)

    def scroll_percent(self) -> float:
        """Scroll position in [0, 1]; 1.0 when everything fits."""
        if self.content_fits:
            return 1.0
        return min(max(self.y_offset / (self.total_lines - self.height), 0.0), 1.0)


def recenter(
    viewport: Viewport,
    selected: int,
    entry_count: int,
    selected_line: Optional[int] = None,
    mode: ScrollMode = ScrollMode.PROPORTIONAL,
) -> Viewport:
    """Move the viewport so the selected entry is in view.

    Near either end the window is pinned to the top or bottom. Otherwise the
    proportional mode maps the entry's position in the list onto the same
    fraction of the rendered lines. That ignores category separator rows,
    so the selected row can sit a little off centre; it is an approximation
    rather than a bug. The exact mode centres ``selected_line`` instead.

    Args:
        viewport: Current viewport (total_lines must be up to date)
        selected: Index of the selected entry
        entry_count: Number of entries
        selected_line: Body line of the selected entry, for exact mode
        mode: Scrolling algorithm

    Returns:
        Viewport with an updated y_offset
    """
    mid = viewport.height // 2
    total = viewport.total_lines

    if mode is ScrollMode.EXACT and selected_line is not None:
        return viewport.set_y_offset(selected_line - mid)

    if selected < mid or entry_count <= 1:
        return viewport.goto_top()
    if selected > total - mid:
        return viewport.goto_bottom()

    position = selected / (entry_count - 1)
    return viewport.set_y_offset(round(total * position) - mid)


def scrollbar_thumb_offset(
    viewport: Viewport,
    track_height: int,
    thumb_height: int = SCROLLBAR_THUMB_HEIGHT,
) -> Optional[int]:
    """Row of the scrollbar thumb within its track.

    Args:
        viewport: Current viewport
        track_height: Rows available between the border corners
        thumb_height: Rows occupied by the thumb

    Returns:
        Offset of the thumb's first row, or None when no thumb is drawn
    """
    if viewport.content_fits or track_height < thumb_height:
        return None
    span = track_height - thumb_height
    offset = math.floor(viewport.scroll_percent() * span)
    return min(max(offset, 0), span)
