"""Git operations: status queries and stage/unstage/discard commands."""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from git_triage.changeset import HeadInfo, StatusCode, StatusRecord
from git_triage.exceptions import (
    BackendMutationError,
    BackendQueryError,
    NoRepositoryError,
)


def parse_porcelain_z(output: str) -> List[StatusRecord]:
    """Parse ``git status --porcelain -z`` output.

    Each record is ``XY path`` terminated by NUL. Renames and copies are
    followed by one more NUL-terminated field holding the original path.

    Args:
        output: Raw command output

    Returns:
        Status records in git's order
    """
    fields = output.split("\0")
    records: List[StatusRecord] = []
    i = 0
    while i < len(fields):
        field = fields[i]
        i += 1
        if len(field) < 4:
            continue

        index_code = StatusCode.from_char(field[0])
        worktree_code = StatusCode.from_char(field[1])
        previous_path = None
        if {index_code, worktree_code} & {StatusCode.RENAMED, StatusCode.COPIED}:
            if i < len(fields):
                previous_path = fields[i] or None
                i += 1

        records.append(
            StatusRecord(
                path=field[3:],
                index_code=index_code,
                worktree_code=worktree_code,
                previous_path=previous_path,
            )
        )
    return records


class GitOps:
    """Handles git commands for one repository."""

    def __init__(self, repo_path: Optional[Path] = None) -> None:
        """Initialize GitOps with optional repository path.

        Args:
            repo_path: Path inside a git repository. Defaults to current directory.
        """
        self.repo_path = repo_path if repo_path is not None else Path.cwd()
        self.logger = logging.getLogger(__name__)

    def _run_git_command(self, *args: str, strip: bool = True) -> Tuple[bool, str]:
        """Run a git command and return success status and output.

        Args:
            *args: Git command arguments
            strip: Strip whitespace from stdout. NUL separated output must be
                left untouched so paths starting or ending in spaces survive.

        Returns:
            Tuple of (success, output/error_message)
        """
        self.logger.debug(f"git {' '.join(args)}")
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=False,
            )
        except (subprocess.SubprocessError, FileNotFoundError) as e:
            return False, f"Git command failed: {e}"

        if result.returncode != 0:
            return False, result.stderr.strip()
        if not strip:
            return True, result.stdout
        return True, result.stdout.strip() or result.stderr.strip()

    def is_git_available(self) -> bool:
        """Check if the git executable can be run."""
        success, _ = self._run_git_command("--version")
        return success

    def has_head(self) -> bool:
        """Check if HEAD resolves to a commit; False on an unborn branch."""
        success, _ = self._run_git_command("rev-parse", "--verify", "-q", "HEAD")
        return success

    def get_repo_root(self) -> Path:
        """Return the top level directory of the work tree.

        Raises:
            NoRepositoryError: when no repository encloses repo_path
        """
        success, output = self._run_git_command("rev-parse", "--show-toplevel")
        if not success or not output:
            raise NoRepositoryError(
                "Not in a git repository",
                current_state=f"searched from {self.repo_path}",
                recovery_suggestion="Run this command from within a git repository",
            )
        return Path(output)

    def list_changes(self) -> List[StatusRecord]:
        """List every changed path in the work tree.

        Raises:
            BackendQueryError: when git status fails
        """
        success, output = self._run_git_command(
            "status", "--porcelain", "-z", strip=False
        )
        if not success:
            raise BackendQueryError(
                "status",
                "Failed to read working tree status",
                stderr=output,
            )
        records = parse_porcelain_z(output)
        self.logger.debug(f"git status reported {len(records)} paths")
        return records

    def get_current_head(self) -> HeadInfo:
        """Return the current branch (empty when detached) and HEAD commit.

        An unborn branch has no commit yet; its ref is empty.

        Raises:
            BackendQueryError: when neither a branch nor a commit is found
        """
        ref_ok, ref = self._run_git_command("rev-parse", "HEAD")
        branch_ok, branch = self._run_git_command("branch", "--show-current")
        if not branch_ok:
            branch = ""
        if not ref_ok:
            ref = ""

        if not ref and not branch:
            raise BackendQueryError(
                "head",
                "Failed to determine the current HEAD",
                stderr=None,
                recovery_suggestion="Check that the repository is not corrupted",
            )
        return HeadInfo(branch=branch, ref=ref)

    def get_ahead_behind(self, branch: str) -> Tuple[int, int]:
        """Count commits ahead of and behind the branch's upstream.

        Args:
            branch: Local branch name

        Returns:
            (ahead, behind); (0, 0) when there is no upstream
        """
        success, output = self._run_git_command(
            "rev-list", "--left-right", "--count", f"{branch}...{branch}@{{upstream}}"
        )
        if not success:
            self.logger.debug(f"No upstream comparison for {branch}: {output}")
            return 0, 0

        parts = output.split()
        if len(parts) != 2:
            return 0, 0
        try:
            return int(parts[0]), int(parts[1])
        except ValueError:
            return 0, 0

    def _mutate(self, operation: str, args: Sequence[str], paths: Sequence[str]) -> None:
        success, output = self._run_git_command(*args, "--", *paths)
        if not success:
            raise BackendMutationError(
                operation,
                paths,
                f"Failed to {operation} {len(paths)} path(s)",
                stderr=output,
                recovery_suggestion="Earlier batches were applied; check 'git status'",
            )
        self.logger.info(f"{operation}: {len(paths)} path(s)")

    def stage(self, paths: Sequence[str]) -> None:
        """Add paths to the index."""
        self._mutate("stage", ["add"], paths)

    def unstage(self, paths: Sequence[str]) -> None:
        """Reset the index entries of paths to HEAD.

        Before the first commit there is no HEAD to restore from, so the
        paths are dropped from the index instead.
        """
        if self.has_head():
            self._mutate("unstage", ["restore", "--staged"], paths)
        else:
            self._mutate("unstage", ["rm", "--cached", "-q"], paths)

    def discard(self, paths: Sequence[str]) -> None:
        """Restore the work tree copies of paths from the index."""
        self._mutate("discard", ["restore"], paths)

    def get_colored_status(self) -> Optional[str]:
        """Return ``git status`` output with colours forced on, or None."""
        success, output = self._run_git_command("-c", "color.ui=always", "status")
        return output if success else None
