"""Main Textual application for the interactive status picker."""

import asyncio
import logging
import signal
from typing import List, Optional, Tuple

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.widgets import Static

from git_triage.changeset import ChangeSet, Entry
from git_triage.selection import Command, Effect
from git_triage.session import Event, Resize, SessionModel, update
from git_triage.tui.render import render_frame
from git_triage.tui.styles import APP_CSS
from git_triage.viewport import ScrollMode


class StatusApp(App[Optional[Tuple[Entry, ...]]]):
    """Full-screen picker over the working tree changes.

    The app returns the final entries when the user confirms, or None when
    the session is abandoned.
    """

    TITLE = "git-triage"
    CSS = APP_CSS

    BINDINGS = [
        Binding("up,k", "command('up')", "up", show=False, key_display="↑/k"),
        Binding("down,j", "command('down')", "down", show=False, key_display="↓/j"),
        Binding("left,h", "command('toggle_left')", "restore", key_display="←/h"),
        Binding("right,l", "command('toggle_right')", "stage", key_display="→/l"),
        Binding("home,g", "command('jump_top')", "top", show=False, key_display="home"),
        Binding(
            "end,G", "command('jump_bottom')", "bottom", show=False, key_display="end"
        ),
        Binding(
            "enter,y",
            "command('confirm')",
            "confirm",
            priority=True,
            key_display="ent/y",
        ),
        Binding(
            "q,escape,ctrl+c",
            "command('quit')",
            "quit",
            priority=True,
            key_display="q",
        ),
    ]

    def __init__(
        self,
        changeset: ChangeSet,
        scroll_mode: ScrollMode = ScrollMode.PROPORTIONAL,
        max_width: int = 80,
        **kwargs,
    ) -> None:
        """Initialize the application.

        Args:
            changeset: Loaded, non-empty change set to triage
            scroll_mode: How the body follows the cursor
            max_width: Widest the frame is allowed to grow
        """
        super().__init__(**kwargs)
        self.model = SessionModel.create(
            changeset, scroll_mode=scroll_mode, max_width=max_width
        )
        self.confirmed = False
        self._watched_signals: List[int] = []
        self.logger = logging.getLogger(__name__)

    @classmethod
    def help_items(cls) -> List[Tuple[str, str]]:
        """Footer labels for the bindings marked as shown."""
        return [
            (binding.key_display or binding.key, binding.description)
            for binding in cls.BINDINGS
            if isinstance(binding, Binding) and binding.show
        ]

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Static(id="frame")

    def on_mount(self) -> None:
        """Size the model to the terminal and catch termination signals."""
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, self._on_terminate_signal)
            except (NotImplementedError, RuntimeError):
                # no loop signal support on this platform; the default handler applies
                self.logger.debug(f"Cannot watch signal {signum} from the event loop")
            else:
                self._watched_signals.append(signum)

        self.handle_session_event(Resize(self.size.width, self.size.height))

    def on_unmount(self) -> None:
        """Release the signal handlers installed on mount."""
        loop = asyncio.get_running_loop()
        for signum in self._watched_signals:
            loop.remove_signal_handler(signum)
        self._watched_signals.clear()

    def on_resize(self, event: events.Resize) -> None:
        """Track terminal size changes."""
        self.handle_session_event(Resize(event.size.width, event.size.height))

    def action_command(self, name: str) -> None:
        """Feed a key binding's command into the session."""
        self.handle_session_event(Command(name))

    def handle_session_event(self, event: Event) -> None:
        """Run one event through the reducer and act on its effects."""
        self.model, effects = update(self.model, event)

        if Effect.EXIT in effects:
            if Effect.DISPATCH in effects:
                self.confirmed = True
                self.logger.debug("Session confirmed")
                self.exit(self.model.entries)
            else:
                self.exit(None)
            return

        self.refresh_frame()

    def refresh_frame(self) -> None:
        """Repaint the frame from the current model."""
        try:
            frame = self.query_one("#frame", Static)
        except NoMatches:
            # not composed yet; on_mount paints the first frame
            return
        frame.update(render_frame(self.model, self.help_items()))

    def _on_terminate_signal(self) -> None:
        self.logger.debug("Termination signal received, leaving without changes")
        self.exit(None)
