"""Session state threaded through the event loop.

``update`` is a pure reducer: it takes the current ``SessionModel`` and one
event and returns the next model plus the effects left for the caller
(dispatching and exiting). Viewport recentering happens inside ``update``.
"""

from dataclasses import dataclass, replace
from typing import FrozenSet, Sequence, Tuple, Union

from git_triage.changeset import ChangeSet, Entry, HeadInfo, initial_selection
from git_triage.selection import Command, Effect, PickerState, transition
from git_triage.viewport import ScrollMode, Viewport, recenter

MIN_WIDTH = 40
MIN_HEIGHT = 10
DEFAULT_MAX_WIDTH = 80

HEADER_HEIGHT = 3
FOOTER_HEIGHT = 3
# blank column plus border glyph on each side of the frame
SIDE_COLUMNS = 2
# spaces between the side borders and the body text
BODY_PADDING = 2


@dataclass(frozen=True)
class Resize:
    """Terminal size changed."""

    width: int
    height: int


Event = Union[Command, Resize]


def count_body_lines(entries: Sequence[Entry]) -> int:
    """Rendered body lines: one per entry plus one separator per category."""
    return len(entries) + len({entry.category for entry in entries})


def body_line_of(entries: Sequence[Entry], index: int) -> int:
    """Body line on which the entry at ``index`` is drawn."""
    seen = set()
    line = 0
    for position, entry in enumerate(entries):
        if entry.category not in seen:
            seen.add(entry.category)
            line += 1
        if position == index:
            return line
        line += 1
    raise IndexError(index)


@dataclass(frozen=True)
class SessionModel:
    """All UI state for one interactive session."""

    picker: PickerState
    head: HeadInfo
    ahead: int = 0
    behind: int = 0
    width: int = 0
    height: int = 0
    viewport: Viewport = Viewport()
    scroll_mode: ScrollMode = ScrollMode.PROPORTIONAL
    max_width: int = DEFAULT_MAX_WIDTH

    @classmethod
    def create(
        cls,
        changeset: ChangeSet,
        scroll_mode: ScrollMode = ScrollMode.PROPORTIONAL,
        max_width: int = DEFAULT_MAX_WIDTH,
    ) -> "SessionModel":
        """Build the starting model. The change set must not be clean."""
        picker = PickerState(
            entries=changeset.entries,
            selected=initial_selection(changeset.entries),
        )
        return cls(
            picker=picker,
            head=changeset.head,
            ahead=changeset.ahead,
            behind=changeset.behind,
            viewport=Viewport(total_lines=count_body_lines(changeset.entries)),
            scroll_mode=scroll_mode,
            max_width=max_width,
        )

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return self.picker.entries

    @property
    def selected(self) -> int:
        return self.picker.selected

    @property
    def frame_width(self) -> int:
        return min(self.max_width, self.width)

    @property
    def main_width(self) -> int:
        """Width between the two side border columns."""
        return self.frame_width - 2 * SIDE_COLUMNS

    @property
    def content_width(self) -> int:
        """Width available to body rows."""
        return self.main_width - 2 * BODY_PADDING

    @property
    def body_height(self) -> int:
        return max(0, self.height - HEADER_HEIGHT - FOOTER_HEIGHT)

    @property
    def too_small(self) -> bool:
        return is_too_small(self)


def is_too_small(model: SessionModel) -> bool:
    """Whether the terminal is below the minimum usable size."""
    return model.width < MIN_WIDTH or model.height < MIN_HEIGHT


def _recentered(model: SessionModel) -> SessionModel:
    viewport = recenter(
        model.viewport.with_content(count_body_lines(model.entries)),
        model.selected,
        len(model.entries),
        selected_line=body_line_of(model.entries, model.selected),
        mode=model.scroll_mode,
    )
    return replace(model, viewport=viewport)


def update(model: SessionModel, event: Event) -> Tuple[SessionModel, FrozenSet[Effect]]:
    """Apply one event to the session.

    While the terminal is too small only Quit is honoured.

    Args:
        model: Current session state
        event: A Command or Resize

    Returns:
        The next model and the effects still to be run by the caller
    """
    if isinstance(event, Resize):
        resized = replace(
            model,
            width=event.width,
            height=event.height,
        )
        resized = replace(
            resized,
            viewport=resized.viewport.resize(resized.main_width, resized.body_height),
        )
        return _recentered(resized), frozenset()

    if model.too_small and event is not Command.QUIT:
        return model, frozenset()

    result = transition(model.picker, event)
    next_model = replace(model, picker=result.state)
    if Effect.RECENTER in result.effects:
        next_model = _recentered(next_model)
    return next_model, result.effects - {Effect.RECENTER}
