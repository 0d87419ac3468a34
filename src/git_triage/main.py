"""CLI entry point for git-triage."""

import argparse
import logging
import signal
import subprocess
import sys
from typing import List, Optional

from git_triage.changeset import load_changeset
from git_triage.config import TriageConfig, configure_logging
from git_triage.dispatcher import CommitDispatcher
from git_triage.exceptions import (
    ErrorReporter,
    GitTriageError,
    RepositoryStateError,
    UserCancelledError,
    handle_unexpected_error,
)
from git_triage.git_ops import GitOps

CLEAN_MESSAGE = "nothing to commit, working tree clean"

logger = logging.getLogger(__name__)


def _exit_on_signal(signum, frame) -> None:
    """Leave at once, without applying anything."""
    sys.exit(0)


def install_signal_handlers() -> None:
    """Exit cleanly on SIGINT/SIGTERM outside the interactive session.

    During the session the terminal is in raw mode and the app watches
    these signals itself.
    """
    signal.signal(signal.SIGINT, _exit_on_signal)
    signal.signal(signal.SIGTERM, _exit_on_signal)


def _print_summary(git_ops: GitOps) -> None:
    status = git_ops.get_colored_status()
    if status:
        print(status)


def cmd_status(args: argparse.Namespace) -> int:
    """Run the interactive status picker.

    Args:
        args: Parsed command line arguments; ``args.config`` holds the
            TriageConfig

    Returns:
        Exit code (0 for success)
    """
    config: TriageConfig = args.config
    git_ops = GitOps()

    if not git_ops.is_git_available():
        raise RepositoryStateError(
            "Git is not installed or not available in PATH",
            recovery_suggestion="Please install git and ensure it's available in your PATH environment variable",
        )

    git_ops = GitOps(git_ops.get_repo_root())
    changeset = load_changeset(git_ops, include_ahead_behind=config.ahead_behind)
    if changeset.is_clean:
        print(CLEAN_MESSAGE)
        return 0

    # Imported here so the clean/no-repository paths never load textual
    from git_triage.tui.app import StatusApp

    app = StatusApp(
        changeset, scroll_mode=config.scroll_mode, max_width=config.max_width
    )
    entries = app.run()
    # the event loop resets SIGINT to its default when it releases the signal
    install_signal_handlers()

    if entries is not None:
        plan = CommitDispatcher(git_ops).dispatch(entries)
        logger.debug(f"Dispatch finished: {plan.summary()}")
    else:
        logger.debug("Session ended without confirming")

    if config.print_summary:
        _print_summary(git_ops)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with its subcommands."""
    parser = argparse.ArgumentParser(
        prog="git-triage",
        description="Interactively stage, unstage and discard working tree changes",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    status_parser = subparsers.add_parser(
        "status", help="View worktree status and stage/restore files (default)"
    )
    status_parser.set_defaults(func=cmd_status)

    parser.set_defaults(func=cmd_status)
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the git-triage command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        args.config = TriageConfig.from_env()
        configure_logging(args.config)
        install_signal_handlers()
        sys.exit(args.func(args))

    except GitTriageError as e:
        ErrorReporter.report_error(e)
        sys.exit(1)
    except KeyboardInterrupt:
        cancel_error = UserCancelledError("git-triage session")
        ErrorReporter.report_error(cancel_error)
        sys.exit(130)
    except (subprocess.SubprocessError, FileNotFoundError) as e:
        wrapped = handle_unexpected_error(
            e, "git operation", "Check git installation and repository state"
        )
        ErrorReporter.report_error(wrapped)
        sys.exit(1)
    except Exception as e:
        wrapped = handle_unexpected_error(e, "git-triage execution")
        ErrorReporter.report_error(wrapped)
        sys.exit(1)


if __name__ == "__main__":
    main()
