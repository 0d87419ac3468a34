"""Exception hierarchy and user-facing error reporting for git-triage."""

from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape


class GitTriageError(Exception):
    """Base class for all errors raised by git-triage."""

    def __init__(self, message: str, recovery_suggestion: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.recovery_suggestion = recovery_suggestion


class RepositoryStateError(GitTriageError):
    """The repository is not in a state git-triage can work with."""

    def __init__(
        self,
        message: str,
        current_state: Optional[str] = None,
        recovery_suggestion: Optional[str] = None,
    ) -> None:
        super().__init__(message, recovery_suggestion)
        self.current_state = current_state


class NoRepositoryError(RepositoryStateError):
    """No git repository was found from the working directory."""


class ConfigError(GitTriageError):
    """An environment setting holds a value that cannot be used."""


class BackendQueryError(GitTriageError):
    """Reading status or HEAD information from git failed."""

    def __init__(
        self,
        operation: str,
        message: str,
        stderr: Optional[str] = None,
        recovery_suggestion: Optional[str] = None,
    ) -> None:
        super().__init__(message, recovery_suggestion)
        self.operation = operation
        self.stderr = stderr


class BackendMutationError(GitTriageError):
    """Applying a batch of stage/unstage/discard changes failed.

    ``operation`` names the path set that failed. Batches applied before
    the failing one are left in place.
    """

    def __init__(
        self,
        operation: str,
        paths: Sequence[str],
        message: str,
        stderr: Optional[str] = None,
        recovery_suggestion: Optional[str] = None,
    ) -> None:
        super().__init__(message, recovery_suggestion)
        self.operation = operation
        self.paths: List[str] = list(paths)
        self.stderr = stderr


class UserCancelledError(GitTriageError):
    """The user interrupted an operation."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation} cancelled by user")
        self.operation = operation


class ErrorReporter:
    """Prints errors to stderr in a consistent format."""

    console = Console(stderr=True, highlight=False)

    @classmethod
    def report_error(cls, error: GitTriageError) -> None:
        """Print an error with its context and recovery suggestion.

        Args:
            error: The error to report
        """
        cls.console.print(f"[bold red]✗ Error:[/] {escape(error.message)}")

        current_state = getattr(error, "current_state", None)
        if current_state:
            cls.console.print(f"  Current state: {current_state}", markup=False)

        if isinstance(error, BackendMutationError) and error.paths:
            cls.console.print(f"  Failed {error.operation} batch:")
            for path in error.paths:
                cls.console.print(f"    {path}", markup=False)

        stderr = getattr(error, "stderr", None)
        if stderr:
            cls.console.print(f"  git: {stderr}", markup=False)

        if error.recovery_suggestion:
            cls.console.print(f"[yellow]💡 {escape(error.recovery_suggestion)}[/]")


def handle_unexpected_error(
    exc: BaseException, context: str, recovery_suggestion: Optional[str] = None
) -> GitTriageError:
    """Wrap an unexpected exception so it can be reported uniformly.

    Args:
        exc: The original exception
        context: Short description of what was being done
        recovery_suggestion: Optional hint for the user

    Returns:
        A GitTriageError carrying the original exception as its cause
    """
    wrapped = GitTriageError(
        f"Unexpected error during {context}: {exc}",
        recovery_suggestion=recovery_suggestion,
    )
    wrapped.__cause__ = exc
    return wrapped
