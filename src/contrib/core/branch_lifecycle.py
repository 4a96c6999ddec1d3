"""Safe deletion, reset and "save work to a new branch" flows.

Retiring a branch runs an explicit state machine::

    START -> INSPECT -> PROCEED_DESTRUCTIVE -> END          (no local work)
                     -> DECIDE -> SAVE | DISCARD -> END    (local work)
                               -> CANCEL -> START          (nothing mutated)

The decision in DECIDE comes from a caller-supplied callable, so the same
flow runs under an interactive prompt in the CLI and under canned answers in
tests.

Git mutations are not transactional. Every flow returns a StepReport listing
the steps that completed, the step that failed and the steps that never ran,
so a partial result can always be reported and continued by hand.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal

from contrib.core.branch_names import is_valid_branch_name
from contrib.core.divergence import compute_divergence
from contrib.core.rebase_strategy import (
    OntoRebase,
    RebaseStrategy,
    apply_rebase_strategy,
    determine_rebase_strategy,
)
from contrib.core.workflow import ProtectedBranchSet, SyncTarget
from contrib.gateway.git.abc import Git
from contrib.gateway.git.types import GitMutationResult, RebaseResult
from contrib.non_ideal_state import (
    BranchAlreadyExists,
    InvalidBranchName,
    LocalCommitsOnBranch,
    NonIdealState,
)

logger = logging.getLogger(__name__)


class LifecycleState(Enum):
    START = "start"
    INSPECT = "inspect"
    PROCEED_DESTRUCTIVE = "proceed-destructive"
    DECIDE = "decide"
    SAVE = "save"
    DISCARD = "discard"
    CANCEL = "cancel"
    END = "end"


@dataclass(frozen=True)
class LocalWork:
    """What deleting or resetting a branch would destroy.

    ``unpushed_commits`` is None when git could not count them.
    """

    uncommitted: bool
    unpushed_commits: int | None

    @property
    def has_work(self) -> bool:
        if self.uncommitted or self.unpushed_commits is None:
            return True
        return self.unpushed_commits > 0


@dataclass(frozen=True)
class SaveWork:
    new_branch: str


@dataclass(frozen=True)
class DiscardWork:
    pass


@dataclass(frozen=True)
class CancelWork:
    pass


WorkDecision = SaveWork | DiscardWork | CancelWork
WorkChoice = Literal["save", "discard", "cancel"]
DecideFn = Callable[[LocalWork, tuple[WorkChoice, ...]], WorkDecision]

RetirePath = Literal["saved", "discarded", "removed", "cancelled", "untouched"]


@dataclass(frozen=True)
class StepFailure:
    step: str
    message: str


@dataclass(frozen=True)
class StepReport:
    """Progress of a multi-step mutation.

    Attributes:
        completed: Steps that succeeded, in order
        failure: The step that failed, or None if every step ran
        pending: Steps never attempted because of the failure
        rebase: Result of the rebase step, when one ran
    """

    completed: tuple[str, ...]
    failure: StepFailure | None
    pending: tuple[str, ...]
    rebase: RebaseResult | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


EMPTY_REPORT = StepReport(completed=(), failure=None, pending=())


@dataclass(frozen=True)
class RetireOutcome:
    """Result of running the lifecycle state machine for one branch."""

    branch: str
    path: RetirePath
    local_work: LocalWork
    report: StepReport
    states: tuple[LifecycleState, ...]
    new_branch: str | None = None
    strategy: RebaseStrategy | None = None

    @property
    def final_state(self) -> LifecycleState:
        return self.states[-1]


Step = tuple[str, Callable[[], GitMutationResult | RebaseResult | LocalCommitsOnBranch]]


def run_steps(steps: list[Step]) -> StepReport:
    """Run steps in order, stopping at the first failure."""
    completed: list[str] = []
    rebase: RebaseResult | None = None
    for index, (label, action) in enumerate(steps):
        logger.debug("Running step: %s", label)
        result = action()
        if isinstance(result, RebaseResult):
            rebase = result
            if not result.success:
                return StepReport(
                    completed=tuple(completed),
                    failure=StepFailure(step=label, message=_rebase_failure_message(result)),
                    pending=tuple(name for name, _ in steps[index + 1 :]),
                    rebase=rebase,
                )
        elif isinstance(result, NonIdealState):
            return StepReport(
                completed=tuple(completed),
                failure=StepFailure(step=label, message=result.message),
                pending=tuple(name for name, _ in steps[index + 1 :]),
                rebase=rebase,
            )
        completed.append(label)
    return StepReport(completed=tuple(completed), failure=None, pending=(), rebase=rebase)


def _rebase_failure_message(result: RebaseResult) -> str:
    if result.conflict_files:
        return "rebase stopped on conflicts in " + ", ".join(result.conflict_files)
    return result.stderr.strip() or "rebase failed"


@dataclass(frozen=True)
class BranchLifecycleManager:
    """Executes lifecycle flows against one working tree.

    Attributes:
        git: Git gateway
        cwd: Working tree the flows run in
        sync_target: Where the base branch is synced from
        base_branch: Branch checked out after a branch is discarded
        protected: Branches that may be saved from but never deleted
    """

    git: Git
    cwd: Path
    sync_target: SyncTarget
    base_branch: str
    protected: ProtectedBranchSet

    # ============================================================================
    # Building blocks
    # ============================================================================

    def inspect_local_work(self, branch: str, tracking_remote: str) -> LocalWork:
        """Report uncommitted changes and commits that exist only locally.

        Commits are counted against ``remote/branch`` while that ref resolves.
        Once the remote branch is gone they are counted against the sync ref,
        so commits made after the last push still show up. A count git cannot
        make is reported as None, which counts as local work.
        """
        tracking_ref = f"{tracking_remote}/{branch}"
        if self.git.get_commit_hash(self.cwd, tracking_ref) is None:
            logger.debug(
                "%s does not resolve; counting against %s", tracking_ref, self.sync_target.ref
            )
            tracking_ref = self.sync_target.ref
        return LocalWork(
            uncommitted=self.git.has_uncommitted_changes(self.cwd),
            unpushed_commits=self.git.count_commits_ahead(self.cwd, branch, tracking_ref),
        )

    def update_local_branch(
        self, branch: str, target: str
    ) -> GitMutationResult | LocalCommitsOnBranch:
        """Move ``branch`` to ``target``; ``reset --hard`` if it is checked out.

        A branch with commits ``target`` does not contain is left where it is.
        """
        divergence = compute_divergence(self.git, self.cwd, branch, target)
        if divergence.ahead > 0:
            return LocalCommitsOnBranch(branch=branch, target=target, count=divergence.ahead)
        if self.git.get_current_branch(self.cwd) == branch:
            return self.git.reset_hard(self.cwd, target)
        return self.git.force_branch(self.cwd, branch, target)

    def check_new_branch_name(
        self, new_branch: str
    ) -> InvalidBranchName | BranchAlreadyExists | None:
        if not is_valid_branch_name(new_branch):
            return InvalidBranchName(branch_name=new_branch)
        if self.git.get_commit_hash(self.cwd, f"refs/heads/{new_branch}") is not None:
            return BranchAlreadyExists(branch_name=new_branch)
        return None

    # ============================================================================
    # Flows
    # ============================================================================

    def retire_branch(
        self, branch: str, *, tracking_remote: str, decide: DecideFn
    ) -> RetireOutcome | InvalidBranchName | BranchAlreadyExists:
        """Get ``branch`` out of the way without losing local work.

        Protected branches are never deleted: without local work they are left
        alone, with local work only save and cancel are offered.
        """
        states = [LifecycleState.START, LifecycleState.INSPECT]
        work = self.inspect_local_work(branch, tracking_remote)
        is_protected = self.protected.is_protected(branch)

        if not work.has_work:
            if is_protected:
                return self._outcome(
                    states, branch, "untouched", work, EMPTY_REPORT, end=LifecycleState.START
                )
            states.append(LifecycleState.PROCEED_DESTRUCTIVE)
            report = self.discard_branch(branch)
            return self._outcome(states, branch, "removed", work, report)

        states.append(LifecycleState.DECIDE)
        choices: tuple[WorkChoice, ...] = (
            ("save", "cancel") if is_protected else ("save", "discard", "cancel")
        )
        decision = decide(work, choices)

        if isinstance(decision, SaveWork):
            name_error = self.check_new_branch_name(decision.new_branch)
            if name_error is not None:
                return name_error
            states.append(LifecycleState.SAVE)
            report, strategy = self.save_work(branch, decision.new_branch, tracking_remote)
            return self._outcome(
                states,
                branch,
                "saved",
                work,
                report,
                new_branch=decision.new_branch,
                strategy=strategy,
            )

        if isinstance(decision, DiscardWork) and "discard" in choices:
            states.append(LifecycleState.DISCARD)
            report = self.discard_branch(branch)
            return self._outcome(states, branch, "discarded", work, report)

        states.append(LifecycleState.CANCEL)
        return self._outcome(
            states, branch, "cancelled", work, EMPTY_REPORT, end=LifecycleState.START
        )

    def save_work(
        self, branch: str, new_branch: str, tracking_remote: str
    ) -> tuple[StepReport, RebaseStrategy | None]:
        """Move the checked-out ``branch`` and its work to ``new_branch``.

        The branch is renamed rather than recreated so uncommitted changes come
        along. The old upstream commit is captured before the rename: commits up
        to it are already upstream, so only later ones are replayed.
        """
        stale_upstream = self.git.get_upstream_ref(self.cwd)
        stale_upstream_hash = (
            self.git.get_commit_hash(self.cwd, stale_upstream) if stale_upstream else None
        )
        restore_ref = f"{tracking_remote}/{branch}"
        can_restore = self.git.get_commit_hash(self.cwd, restore_ref) is not None
        sync_ref = self.sync_target.ref
        chosen: list[RebaseStrategy] = []

        def rebase_saved_work() -> RebaseResult:
            if stale_upstream_hash is not None:
                strategy: RebaseStrategy = OntoRebase(old_base=stale_upstream_hash)
            else:
                strategy = determine_rebase_strategy(self.git, self.cwd, new_branch, sync_ref)
            chosen.append(strategy)
            return apply_rebase_strategy(self.git, self.cwd, strategy, sync_ref)

        steps: list[Step] = [
            (
                f"rename {branch} to {new_branch}",
                lambda: self.git.rename_branch(self.cwd, branch, new_branch),
            ),
            ("clear stale upstream", lambda: self.git.unset_upstream(self.cwd)),
            (
                f"fetch {self.sync_target.remote}",
                lambda: self.git.fetch_remote(self.cwd, self.sync_target.remote),
            ),
            (f"rebase {new_branch} onto {sync_ref}", rebase_saved_work),
        ]
        if can_restore:
            steps.append(
                (
                    f"reset {branch} to {restore_ref}",
                    lambda: self.git.force_branch(self.cwd, branch, restore_ref),
                )
            )

        report = run_steps(steps)
        return report, (chosen[0] if chosen else None)

    def discard_branch(self, branch: str) -> StepReport:
        """Switch to the synced base branch and force-delete ``branch``."""
        sync = self.sync_target
        steps: list[Step] = [
            (f"fetch {sync.remote}", lambda: self.git.fetch_remote(self.cwd, sync.remote)),
            (
                f"checkout {self.base_branch}",
                lambda: self.git.checkout_branch(self.cwd, self.base_branch),
            ),
            (
                f"sync {self.base_branch} with {sync.ref}",
                lambda: self.update_local_branch(self.base_branch, sync.ref),
            ),
            (
                f"delete {branch}",
                lambda: self.git.delete_branch(self.cwd, branch, force=True),
            ),
        ]
        return run_steps(steps)

    def move_commits_to_new_branch(
        self, branch: str, new_branch: str, reset_to: str
    ) -> StepReport | InvalidBranchName | BranchAlreadyExists:
        """Carry local commits on the checked-out ``branch`` over to ``new_branch``.

        ``branch`` is then recreated at ``reset_to`` and checked out again.
        """
        name_error = self.check_new_branch_name(new_branch)
        if name_error is not None:
            return name_error
        steps: list[Step] = [
            (
                f"rename {branch} to {new_branch}",
                lambda: self.git.rename_branch(self.cwd, branch, new_branch),
            ),
            (
                f"recreate {branch} at {reset_to}",
                lambda: self.git.force_branch(self.cwd, branch, reset_to),
            ),
            (f"checkout {branch}", lambda: self.git.checkout_branch(self.cwd, branch)),
        ]
        return run_steps(steps)

    def _outcome(
        self,
        states: list[LifecycleState],
        branch: str,
        path: RetirePath,
        work: LocalWork,
        report: StepReport,
        *,
        end: LifecycleState = LifecycleState.END,
        new_branch: str | None = None,
        strategy: RebaseStrategy | None = None,
    ) -> RetireOutcome:
        states.append(end)
        return RetireOutcome(
            branch=branch,
            path=path,
            local_work=work,
            report=report,
            states=tuple(states),
            new_branch=new_branch,
            strategy=strategy,
        )
