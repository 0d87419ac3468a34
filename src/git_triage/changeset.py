"""Change set loading: git status records to sorted picker entries."""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class StatusCode(Enum):
    """Porcelain status letters."""

    UNMODIFIED = " "
    UNTRACKED = "?"
    MODIFIED = "M"
    ADDED = "A"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"
    UNMERGED = "U"
    TYPE_CHANGED = "T"

    @classmethod
    def from_char(cls, char: str) -> "StatusCode":
        """Map a porcelain status letter to a StatusCode.

        Letters git may add in the future are treated as modifications.
        """
        try:
            return cls(char)
        except ValueError:
            return cls.MODIFIED


class Category(Enum):
    """Section an entry is listed under. Declaration order is display order."""

    STAGED = "Staged"
    UNSTAGED = "Unstaged"
    UNTRACKED = "Untracked"

    @property
    def rank(self) -> int:
        return _CATEGORY_ORDER.index(self)


_CATEGORY_ORDER = list(Category)


class PendingAction(Enum):
    """A requested change that is applied only on confirm."""

    STAGE = "stage"
    UNSTAGE = "unstage"
    DISCARD = "discard"


@dataclass(frozen=True)
class StatusRecord:
    """One line of ``git status --porcelain`` output."""

    path: str
    index_code: StatusCode
    worktree_code: StatusCode
    previous_path: Optional[str] = None


@dataclass(frozen=True)
class HeadInfo:
    """Where HEAD points. ``branch`` is empty when detached."""

    branch: str
    ref: str

    @property
    def is_branch(self) -> bool:
        return bool(self.branch)

    @property
    def name(self) -> str:
        return self.branch or self.ref

    @property
    def short_ref(self) -> str:
        return self.ref[:7]


@dataclass(frozen=True)
class Entry:
    """One row of the picker.

    The same path may appear twice, once staged and once unstaged; those
    are separate entries.
    """

    category: Category
    path: str
    status: StatusCode
    staged: bool = False
    previous_path: Optional[str] = None
    pending: FrozenSet[PendingAction] = field(default_factory=frozenset)

    def has(self, action: PendingAction) -> bool:
        return action in self.pending

    def with_pending(self, action: PendingAction) -> "Entry":
        return replace(self, pending=self.pending | {action})

    def without_pending(self, action: PendingAction) -> "Entry":
        return replace(self, pending=self.pending - {action})

    @property
    def sort_key(self) -> Tuple[int, str]:
        return (self.category.rank, self.path)


@dataclass(frozen=True)
class ChangeSet:
    """Everything the interactive session needs from the repository."""

    entries: Tuple[Entry, ...]
    head: HeadInfo
    ahead: int = 0
    behind: int = 0

    @property
    def is_clean(self) -> bool:
        return not self.entries


def build_entries(records: Iterable[StatusRecord]) -> List[Entry]:
    """Turn raw status records into sorted picker entries.

    A record with both an index and a worktree change yields two entries.

    Args:
        records: Parsed porcelain status records

    Returns:
        Entries sorted by category (staged, unstaged, untracked) then path
    """
    entries: List[Entry] = []
    for record in records:
        if (
            record.index_code is StatusCode.UNTRACKED
            and record.worktree_code is StatusCode.UNTRACKED
        ):
            entries.append(
                Entry(
                    category=Category.UNTRACKED,
                    path=record.path,
                    status=StatusCode.UNTRACKED,
                )
            )
            continue

        if record.index_code is not StatusCode.UNMODIFIED:
            entries.append(
                Entry(
                    category=Category.STAGED,
                    path=record.path,
                    status=record.index_code,
                    staged=True,
                    previous_path=record.previous_path,
                )
            )
        if record.worktree_code is not StatusCode.UNMODIFIED:
            entries.append(
                Entry(
                    category=Category.UNSTAGED,
                    path=record.path,
                    status=record.worktree_code,
                )
            )

    entries.sort(key=lambda entry: entry.sort_key)
    return entries


def initial_selection(entries: Sequence[Entry]) -> int:
    """Index of the first unstaged entry, or 0 when there is none."""
    for index, entry in enumerate(entries):
        if entry.category is Category.UNSTAGED:
            return index
    return 0


def load_changeset(git_ops, include_ahead_behind: bool = True) -> ChangeSet:
    """Query git for the working tree state.

    Args:
        git_ops: Backend providing list_changes, get_current_head and
            get_ahead_behind
        include_ahead_behind: Skip the upstream comparison when False

    Returns:
        The loaded ChangeSet; ``is_clean`` is True when nothing changed
    """
    head = git_ops.get_current_head()
    entries = build_entries(git_ops.list_changes())
    logger.debug(
        f"Loaded {len(entries)} entries on {head.branch or 'detached ' + head.ref}"
    )

    ahead = behind = 0
    if entries and include_ahead_behind and head.is_branch:
        ahead, behind = git_ops.get_ahead_behind(head.branch)

    return ChangeSet(entries=tuple(entries), head=head, ahead=ahead, behind=behind)
