"""Tests for the session reducer."""

import pytest

from git_triage.selection import Command, Effect
from git_triage.session import (
    Resize,
    SessionModel,
    body_line_of,
    count_body_lines,
    update,
)
from git_triage.viewport import ScrollMode


def _sized(model, width=80, height=24):
    model, effects = update(model, Resize(width, height))
    assert effects == frozenset()
    return model


class TestBodyLines:
    """Test body line bookkeeping."""

    def test_separator_before_each_category(self, sample_entries):
        """Each category adds one separator line."""
        assert count_body_lines(sample_entries) == 6
        assert [body_line_of(sample_entries, i) for i in range(3)] == [1, 3, 5]

    def test_single_category(self, long_changeset):
        """One separator, then the entries."""
        entries = long_changeset.entries

        assert count_body_lines(entries) == 41
        assert body_line_of(entries, 0) == 1
        assert body_line_of(entries, 39) == 40

    def test_index_out_of_range(self, sample_entries):
        """Asking past the end is an error."""
        with pytest.raises(IndexError):
            body_line_of(sample_entries, 3)


class TestSessionModel:
    """Test model construction and geometry."""

    def test_create(self, sample_changeset):
        """The cursor starts on the first unstaged entry."""
        model = SessionModel.create(sample_changeset)

        assert model.selected == 1
        assert model.viewport.total_lines == 6
        assert model.head == sample_changeset.head
        # no size yet
        assert model.too_small

    def test_geometry(self, sample_changeset):
        """Frame, main and content widths nest inside each other."""
        model = _sized(SessionModel.create(sample_changeset), 80, 24)

        assert model.frame_width == 80
        assert model.main_width == 76
        assert model.content_width == 72
        assert model.body_height == 18
        assert (model.viewport.width, model.viewport.height) == (76, 18)
        assert not model.too_small

    def test_frame_width_is_capped(self, sample_changeset):
        """Wide terminals keep the frame at its maximum width."""
        model = _sized(SessionModel.create(sample_changeset), 200, 30)

        assert model.frame_width == 80
        assert model.main_width == 76

    def test_custom_max_width(self, sample_changeset):
        """The cap can be raised."""
        model = _sized(SessionModel.create(sample_changeset, max_width=120), 200, 30)

        assert model.frame_width == 120


class TestUpdate:
    """Test events applied to the session."""

    def test_navigation(self, sample_changeset):
        """Commands move the cursor; recentering is handled internally."""
        model = _sized(SessionModel.create(sample_changeset))

        model, effects = update(model, Command.DOWN)

        assert model.selected == 2
        assert effects == frozenset()

    def test_confirm(self, sample_changeset):
        """Confirm leaves dispatch and exit to the caller."""
        model = _sized(SessionModel.create(sample_changeset))

        model, effects = update(model, Command.TOGGLE_RIGHT)
        model, effects = update(model, Command.CONFIRM)

        assert effects == {Effect.DISPATCH, Effect.EXIT}
        assert [e.path for e in model.entries if e.pending] == ["b.txt"]

    def test_too_small_ignores_everything_but_quit(self, sample_changeset):
        """A cramped terminal only lets the user leave."""
        model = _sized(SessionModel.create(sample_changeset), 30, 8)
        assert model.too_small

        for command in Command:
            if command is Command.QUIT:
                continue
            next_model, effects = update(model, command)
            assert next_model == model
            assert effects == frozenset()

        _, effects = update(model, Command.QUIT)
        assert effects == {Effect.EXIT}

    def test_too_small_boundaries(self, sample_changeset):
        """40 columns by 10 rows is the smallest usable size."""
        model = SessionModel.create(sample_changeset)

        assert not _sized(model, 40, 10).too_small
        assert _sized(model, 39, 10).too_small
        assert _sized(model, 40, 9).too_small

    def test_jump_bottom_scrolls(self, long_changeset):
        """Jumping to the last entry shows the bottom of the list."""
        model = _sized(SessionModel.create(long_changeset), 80, 20)
        assert model.viewport.y_offset == 0

        model, _ = update(model, Command.JUMP_BOTTOM)

        assert model.selected == 39
        assert model.viewport.y_offset == 41 - 14

    def test_resize_recenters(self, long_changeset):
        """A resize keeps the selected entry in view."""
        model = _sized(SessionModel.create(long_changeset), 80, 20)
        model, _ = update(model, Command.JUMP_BOTTOM)

        model = _sized(model, 80, 40)

        assert model.body_height == 34
        assert model.viewport.y_offset == 41 - 34

    def test_exact_scrolling(self, long_changeset):
        """Exact mode centres the selected line."""
        model = _sized(
            SessionModel.create(long_changeset, scroll_mode=ScrollMode.EXACT), 80, 20
        )

        for _ in range(20):
            model, _ = update(model, Command.DOWN)

        assert model.selected == 20
        # entry 20 is drawn on line 21, window of 14 lines
        assert model.viewport.y_offset == 21 - 7
