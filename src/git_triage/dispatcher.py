"""Apply the confirmed pending actions to the repository in batches."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from git_triage.changeset import Entry, PendingAction


@dataclass
class DispatchPlan:
    """Paths grouped by the git command that will be run on them."""

    to_unstage: List[str] = field(default_factory=list)
    to_stage: List[str] = field(default_factory=list)
    to_discard: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.to_unstage or self.to_stage or self.to_discard)

    def summary(self) -> str:
        parts = []
        if self.to_unstage:
            parts.append(f"{len(self.to_unstage)} unstaged")
        if self.to_stage:
            parts.append(f"{len(self.to_stage)} staged")
        if self.to_discard:
            parts.append(f"{len(self.to_discard)} discarded")
        return ", ".join(parts) if parts else "no changes"


def plan_dispatch(entries: Iterable[Entry]) -> DispatchPlan:
    """Group entries by pending action, keeping list order.

    An entry marked for both unstage and discard appears in both lists.
    """
    plan = DispatchPlan()
    for entry in entries:
        if entry.has(PendingAction.UNSTAGE):
            plan.to_unstage.append(entry.path)
        if entry.has(PendingAction.STAGE):
            plan.to_stage.append(entry.path)
        if entry.has(PendingAction.DISCARD):
            plan.to_discard.append(entry.path)
    return plan


class CommitDispatcher:
    """Runs one backend call per non-empty batch: unstage, stage, discard.

    Unstaging runs first so a file that is both unstaged and discarded is
    restored from HEAD rather than from its staged content. A failing batch
    stops the remaining ones; earlier batches are not rolled back.
    """

    def __init__(self, git_ops) -> None:
        self.git_ops = git_ops
        self.logger = logging.getLogger(__name__)

    def dispatch(self, entries: Iterable[Entry]) -> DispatchPlan:
        """Apply pending actions.

        Args:
            entries: Final entries from the confirmed session

        Returns:
            The plan that was applied

        Raises:
            BackendMutationError: when any batch fails
        """
        plan = plan_dispatch(entries)
        if plan.is_empty:
            self.logger.debug("Nothing pending, no git commands run")
            return plan

        if plan.to_unstage:
            self.logger.debug(f"Unstaging {plan.to_unstage}")
            self.git_ops.unstage(plan.to_unstage)
        if plan.to_stage:
            self.logger.debug(f"Staging {plan.to_stage}")
            self.git_ops.stage(plan.to_stage)
        if plan.to_discard:
            self.logger.debug(f"Discarding {plan.to_discard}")
            self.git_ops.discard(plan.to_discard)

        self.logger.info(f"Applied: {plan.summary()}")
        return plan
