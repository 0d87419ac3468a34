"""Selection state machine for the picker.

State is an immutable ``PickerState``; ``transition`` maps a state and a
command to the next state plus the effects the event loop must run.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from git_triage.changeset import Category, Entry, PendingAction


class Command(Enum):
    """Logical input commands, independent of the key that produced them."""

    UP = "up"
    DOWN = "down"
    TOGGLE_LEFT = "toggle_left"
    TOGGLE_RIGHT = "toggle_right"
    JUMP_TOP = "jump_top"
    JUMP_BOTTOM = "jump_bottom"
    CONFIRM = "confirm"
    QUIT = "quit"


class Effect(Enum):
    """Side effects requested by a transition."""

    RECENTER = "recenter"
    DISPATCH = "dispatch"
    EXIT = "exit"


class Side(Enum):
    """Column an entry is drawn in."""

    LEFT = "left"
    RIGHT = "right"


def render_side(entry: Entry) -> Side:
    """Column for an entry, derived from its staged flag and pending actions.

    An entry sits on the right when it is headed for the index: marked for
    staging, or already staged and not marked for unstaging.
    """
    if entry.has(PendingAction.STAGE) or (
        entry.staged and not entry.has(PendingAction.UNSTAGE)
    ):
        return Side.RIGHT
    return Side.LEFT


def toggle_left(entry: Entry) -> Optional[Entry]:
    """Move an entry towards "not staged"; None when nothing changes."""
    if entry.has(PendingAction.STAGE):
        return entry.without_pending(PendingAction.STAGE)

    discarding = entry.has(PendingAction.DISCARD)
    if (
        entry.category is not Category.UNTRACKED
        and not discarding
        and (entry.has(PendingAction.UNSTAGE) or not entry.staged)
    ):
        return entry.with_pending(PendingAction.DISCARD)

    if entry.staged and not entry.has(PendingAction.UNSTAGE):
        return entry.with_pending(PendingAction.UNSTAGE)

    return None


def toggle_right(entry: Entry) -> Optional[Entry]:
    """Move an entry towards "staged"; None when nothing changes."""
    if entry.has(PendingAction.DISCARD):
        return entry.without_pending(PendingAction.DISCARD)

    if entry.staged and entry.has(PendingAction.UNSTAGE):
        return entry.without_pending(PendingAction.UNSTAGE)

    if not entry.staged and not entry.has(PendingAction.STAGE):
        return entry.with_pending(PendingAction.STAGE)

    return None


@dataclass(frozen=True)
class PickerState:
    """Entries and cursor. ``entries`` must not be empty."""

    entries: Tuple[Entry, ...]
    selected: int = 0

    def __post_init__(self) -> None:
        if not self.entries:
            raise ValueError("PickerState needs at least one entry")
        if not 0 <= self.selected < len(self.entries):
            raise ValueError(
                f"selected index {self.selected} outside 0..{len(self.entries) - 1}"
            )

    @property
    def current(self) -> Entry:
        return self.entries[self.selected]

    def move(self, delta: int) -> "PickerState":
        return replace(self, selected=(self.selected + delta) % len(self.entries))

    def goto(self, index: int) -> "PickerState":
        return replace(self, selected=index)

    def with_current(self, entry: Entry) -> "PickerState":
        entries = list(self.entries)
        entries[self.selected] = entry
        return replace(self, entries=tuple(entries))


@dataclass(frozen=True)
class Transition:
    """Result of applying one command."""

    state: PickerState
    effects: FrozenSet[Effect] = frozenset()


def transition(state: PickerState, command: Command) -> Transition:
    """Apply one command to the picker.

    Toggles that change the selected entry also advance the cursor, so a
    held key walks down the list. Toggles with no legal next state are
    ignored.

    Args:
        state: Current picker state
        command: Command to apply

    Returns:
        The next state and the effects to run
    """
    if command is Command.UP:
        return Transition(state.move(-1), frozenset({Effect.RECENTER}))
    if command is Command.DOWN:
        return Transition(state.move(1), frozenset({Effect.RECENTER}))
    if command is Command.JUMP_TOP:
        return Transition(state.goto(0), frozenset({Effect.RECENTER}))
    if command is Command.JUMP_BOTTOM:
        return Transition(
            state.goto(len(state.entries) - 1), frozenset({Effect.RECENTER})
        )
    if command is Command.CONFIRM:
        return Transition(state, frozenset({Effect.DISPATCH, Effect.EXIT}))
    if command is Command.QUIT:
        return Transition(state, frozenset({Effect.EXIT}))

    toggle = toggle_left if command is Command.TOGGLE_LEFT else toggle_right
    updated = toggle(state.current)
    if updated is None:
        return Transition(state)
    return Transition(
        state.with_current(updated).move(1), frozenset({Effect.RECENTER})
    )
