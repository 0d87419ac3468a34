"""Tests for the picker state machine."""

from collections import deque

import pytest

from git_triage.changeset import Category, Entry, PendingAction, StatusCode
from git_triage.dispatcher import plan_dispatch
from git_triage.selection import (
    Command,
    Effect,
    PickerState,
    Side,
    render_side,
    toggle_left,
    toggle_right,
    transition,
)

STAGE = PendingAction.STAGE
UNSTAGE = PendingAction.UNSTAGE
DISCARD = PendingAction.DISCARD


def staged(path="s.txt", pending=()):
    return Entry(
        Category.STAGED,
        path,
        StatusCode.MODIFIED,
        staged=True,
        pending=frozenset(pending),
    )


def unstaged(path="u.txt", pending=()):
    return Entry(
        Category.UNSTAGED, path, StatusCode.MODIFIED, pending=frozenset(pending)
    )


def untracked(path="n.txt", pending=()):
    return Entry(
        Category.UNTRACKED, path, StatusCode.UNTRACKED, pending=frozenset(pending)
    )


class TestToggleLeft:
    """Test moving entries towards "not staged"."""

    def test_cancels_pending_stage(self):
        """A stage mark is withdrawn first."""
        assert toggle_left(unstaged(pending={STAGE})).pending == frozenset()
        assert toggle_left(untracked(pending={STAGE})).pending == frozenset()

    def test_unstaged_file_marked_for_discard(self):
        """An unstaged change is marked for discarding."""
        assert toggle_left(unstaged()).pending == {DISCARD}

    def test_staged_file_marked_for_unstage(self):
        """A staged change is marked for unstaging."""
        assert toggle_left(staged()).pending == {UNSTAGE}

    def test_unstaging_file_marked_for_discard(self):
        """A second press on a staged file also discards it."""
        assert toggle_left(staged(pending={UNSTAGE})).pending == {UNSTAGE, DISCARD}

    def test_untracked_file_is_never_discarded(self):
        """Untracked files cannot move further left."""
        assert toggle_left(untracked()) is None

    def test_no_further_left(self):
        """Discarding entries stay put."""
        assert toggle_left(unstaged(pending={DISCARD})) is None
        assert toggle_left(staged(pending={UNSTAGE, DISCARD})) is None


class TestToggleRight:
    """Test moving entries towards "staged"."""

    def test_cancels_pending_discard(self):
        """A discard mark is withdrawn first."""
        assert toggle_right(unstaged(pending={DISCARD})).pending == frozenset()
        assert toggle_right(staged(pending={UNSTAGE, DISCARD})).pending == {UNSTAGE}

    def test_cancels_pending_unstage(self):
        """A staged file marked for unstaging returns to the index."""
        assert toggle_right(staged(pending={UNSTAGE})).pending == frozenset()

    def test_marks_for_stage(self):
        """Unstaged and untracked files are marked for staging."""
        assert toggle_right(unstaged()).pending == {STAGE}
        assert toggle_right(untracked()).pending == {STAGE}

    def test_no_further_right(self):
        """Staged files and stage-marked files stay put."""
        assert toggle_right(staged()) is None
        assert toggle_right(unstaged(pending={STAGE})) is None


class TestRenderSide:
    """Test which column an entry is drawn in."""

    def test_sides(self):
        """Entries headed for the index sit on the right."""
        assert render_side(staged()) is Side.RIGHT
        assert render_side(staged(pending={UNSTAGE})) is Side.LEFT
        assert render_side(unstaged()) is Side.LEFT
        assert render_side(unstaged(pending={STAGE})) is Side.RIGHT
        assert render_side(untracked(pending={STAGE})) is Side.RIGHT
        assert render_side(unstaged(pending={DISCARD})) is Side.LEFT


class TestPickerState:
    """Test cursor bookkeeping."""

    def test_rejects_empty_entries(self):
        """A picker needs something to pick."""
        with pytest.raises(ValueError):
            PickerState(entries=())

    def test_rejects_out_of_range_cursor(self):
        """The cursor must point at an entry."""
        with pytest.raises(ValueError):
            PickerState(entries=(unstaged(),), selected=1)

    def test_move_wraps(self):
        """Moving past either end wraps around."""
        state = PickerState(entries=(staged(), unstaged(), untracked()), selected=2)

        assert state.move(1).selected == 0
        assert state.move(1).move(-1).selected == 2
        assert PickerState(entries=state.entries).move(-1).selected == 2


class TestTransition:
    """Test commands applied to the picker."""

    def setup_method(self):
        """Three entries, cursor on the unstaged one."""
        self.state = PickerState(
            entries=(staged("a.txt"), unstaged("b.txt"), untracked("c.txt")),
            selected=1,
        )

    def test_navigation_requests_recenter(self):
        """Every cursor move asks for the viewport to follow."""
        for command, expected in [
            (Command.UP, 0),
            (Command.DOWN, 2),
            (Command.JUMP_TOP, 0),
            (Command.JUMP_BOTTOM, 2),
        ]:
            result = transition(self.state, command)
            assert result.state.selected == expected
            assert result.effects == {Effect.RECENTER}
            assert result.state.entries == self.state.entries

    def test_up_and_down_are_inverse(self):
        """Up undoes Down from every position."""
        for index in range(3):
            state = PickerState(entries=self.state.entries, selected=index)
            down = transition(state, Command.DOWN).state
            assert transition(down, Command.UP).state == state

    def test_confirm_and_quit(self):
        """Confirm dispatches and exits; quit only exits."""
        confirm = transition(self.state, Command.CONFIRM)
        quit_ = transition(self.state, Command.QUIT)

        assert confirm.effects == {Effect.DISPATCH, Effect.EXIT}
        assert quit_.effects == {Effect.EXIT}
        assert confirm.state == self.state
        assert quit_.state == self.state

    def test_effective_toggle_advances_cursor(self):
        """Marking an entry moves on to the next one."""
        result = transition(self.state, Command.TOGGLE_RIGHT)

        assert result.state.entries[1].pending == {STAGE}
        assert result.state.selected == 2
        assert result.effects == {Effect.RECENTER}

    def test_ignored_toggle_changes_nothing(self):
        """A toggle with nowhere to go leaves state and cursor alone."""
        state = PickerState(entries=self.state.entries, selected=2)

        result = transition(state, Command.TOGGLE_LEFT)

        assert result.state == state
        assert result.effects == frozenset()

    def test_stage_unstaged_file_then_confirm(self):
        """Staging b.txt dispatches exactly that path."""
        result = transition(self.state, Command.TOGGLE_RIGHT)
        assert result.state.selected == 2

        confirm = transition(result.state, Command.CONFIRM)
        plan = plan_dispatch(confirm.state.entries)

        assert plan.to_stage == ["b.txt"]
        assert plan.to_unstage == []
        assert plan.to_discard == []

    def test_unstage_staged_file_then_confirm(self):
        """Unstaging a.txt dispatches exactly that path."""
        state = PickerState(entries=self.state.entries, selected=0)

        result = transition(state, Command.TOGGLE_LEFT)
        plan = plan_dispatch(transition(result.state, Command.CONFIRM).state.entries)

        assert result.state.entries[0].pending == {UNSTAGE}
        assert plan.to_unstage == ["a.txt"]
        assert plan.to_stage == []
        assert plan.to_discard == []

    def test_opposite_toggles_cancel(self):
        """A toggle followed by the opposite one restores the entry."""
        for entry in (staged(), unstaged(), untracked()):
            for first, second in [
                (Command.TOGGLE_LEFT, Command.TOGGLE_RIGHT),
                (Command.TOGGLE_RIGHT, Command.TOGGLE_LEFT),
            ]:
                state = PickerState(entries=(entry,))
                after_first = transition(state, first).state
                if after_first == state:
                    continue
                restored = transition(after_first, second).state
                assert restored.entries[0] == entry

    def test_restaged_entry_can_be_unstaged_again(self):
        """Right then left on an unstage-marked staged file marks it again."""
        state = PickerState(entries=(staged(pending={UNSTAGE}),))

        restaged = transition(state, Command.TOGGLE_RIGHT).state
        assert restaged.entries[0].pending == frozenset()

        again = transition(restaged, Command.TOGGLE_LEFT).state
        assert again.entries[0].pending == {UNSTAGE}


class TestReachableStates:
    """Walk every pending set reachable by toggling."""

    def _reachable(self, entry):
        seen = {entry.pending}
        queue = deque([entry])
        while queue:
            current = queue.popleft()
            for toggle in (toggle_left, toggle_right):
                updated = toggle(current)
                if updated is not None and updated.pending not in seen:
                    seen.add(updated.pending)
                    queue.append(updated)
        return seen

    def test_staged_entry(self):
        """Staged files can be unstaged and then discarded, never staged."""
        assert self._reachable(staged()) == {
            frozenset(),
            frozenset({UNSTAGE}),
            frozenset({UNSTAGE, DISCARD}),
        }

    def test_unstaged_entry(self):
        """Unstaged files are staged or discarded, never both."""
        assert self._reachable(unstaged()) == {
            frozenset(),
            frozenset({STAGE}),
            frozenset({DISCARD}),
        }

    def test_untracked_entry(self):
        """Untracked files can only be staged."""
        assert self._reachable(untracked()) == {frozenset(), frozenset({STAGE})}
