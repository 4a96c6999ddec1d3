"""Tests for the branch retirement state machine and its flows."""

from pathlib import Path

from contrib.core.branch_lifecycle import (
    BranchLifecycleManager,
    CancelWork,
    DiscardWork,
    LifecycleState,
    LocalWork,
    SaveWork,
    WorkChoice,
    WorkDecision,
    run_steps,
)
from contrib.core.rebase_strategy import OntoRebase
from contrib.core.workflow import resolve_protected_branches, resolve_sync_target
from contrib.gateway.git.fake import FakeGit
from contrib.gateway.git.types import GitCommandFailed, GitCommandSucceeded, RebaseResult
from contrib.non_ideal_state import BranchAlreadyExists, InvalidBranchName, LocalCommitsOnBranch
from tests.test_utils.configs import clean_flow_config

CWD = Path("/repo")
STALE_SHA = "5a1e5a1e5a1e5a1e"


def _manager(git: FakeGit) -> BranchLifecycleManager:
    config = clean_flow_config(role="contributor")
    return BranchLifecycleManager(
        git=git,
        cwd=CWD,
        sync_target=resolve_sync_target(config),
        base_branch="dev",
        protected=resolve_protected_branches(config),
    )


class _Decider:
    """Canned decision that records what it was offered."""

    def __init__(self, decision: WorkDecision) -> None:
        self.decision = decision
        self.offered: list[tuple[WorkChoice, ...]] = []

    def __call__(self, work: LocalWork, choices: tuple[WorkChoice, ...]) -> WorkDecision:
        self.offered.append(choices)
        return self.decision


def test_branch_without_work_is_removed_without_asking() -> None:
    git = FakeGit(
        current_branch="feature/done",
        ahead_counts={("feature/done", "upstream/dev"): 0},
    )
    decider = _Decider(CancelWork())

    outcome = _manager(git).retire_branch(
        "feature/done", tracking_remote="upstream", decide=decider
    )

    assert not isinstance(outcome, (InvalidBranchName, BranchAlreadyExists))
    assert outcome.path == "removed"
    assert decider.offered == []
    assert outcome.states == (
        LifecycleState.START,
        LifecycleState.INSPECT,
        LifecycleState.PROCEED_DESTRUCTIVE,
        LifecycleState.END,
    )
    assert git.deleted_branches == [("feature/done", True)]
    assert git.current_branch == "dev"
    assert git.hard_resets == ["upstream/dev"]


def test_cancel_mutates_nothing_and_returns_to_start() -> None:
    git = FakeGit(current_branch="feature/wip", uncommitted=True)

    outcome = _manager(git).retire_branch(
        "feature/wip", tracking_remote="upstream", decide=_Decider(CancelWork())
    )

    assert not isinstance(outcome, (InvalidBranchName, BranchAlreadyExists))
    assert outcome.path == "cancelled"
    assert outcome.final_state == LifecycleState.START
    assert git.mutations == []


def test_discard_deletes_branch_with_work() -> None:
    git = FakeGit(
        current_branch="feature/wip",
        commit_hashes={"upstream/feature/wip": STALE_SHA},
        ahead_counts={("feature/wip", "upstream/feature/wip"): 2},
    )

    outcome = _manager(git).retire_branch(
        "feature/wip", tracking_remote="upstream", decide=_Decider(DiscardWork())
    )

    assert not isinstance(outcome, (InvalidBranchName, BranchAlreadyExists))
    assert outcome.path == "discarded"
    assert outcome.local_work == LocalWork(uncommitted=False, unpushed_commits=2)
    assert git.deleted_branches == [("feature/wip", True)]


def test_protected_branch_without_work_is_untouched() -> None:
    git = FakeGit(
        current_branch="dev",
        commit_hashes={"origin/dev": STALE_SHA},
        ahead_counts={("dev", "origin/dev"): 0},
    )

    outcome = _manager(git).retire_branch(
        "dev", tracking_remote="origin", decide=_Decider(DiscardWork())
    )

    assert not isinstance(outcome, (InvalidBranchName, BranchAlreadyExists))
    assert outcome.path == "untouched"
    assert outcome.final_state == LifecycleState.START
    assert git.mutations == []


def test_gone_remote_counts_commits_against_sync_ref() -> None:
    """Commits made after the remote branch was deleted still count as work."""
    git = FakeGit(
        current_branch="feature/done",
        ahead_counts={("feature/done", "upstream/dev"): 3},
    )
    decider = _Decider(CancelWork())

    outcome = _manager(git).retire_branch(
        "feature/done", tracking_remote="upstream", decide=decider
    )

    assert not isinstance(outcome, (InvalidBranchName, BranchAlreadyExists))
    assert outcome.local_work == LocalWork(uncommitted=False, unpushed_commits=3)
    assert LifecycleState.DECIDE in outcome.states
    assert decider.offered == [("save", "discard", "cancel")]
    assert git.deleted_branches == []


def test_commits_that_cannot_be_counted_are_treated_as_work() -> None:
    git = FakeGit(current_branch="feature/done")
    decider = _Decider(CancelWork())

    outcome = _manager(git).retire_branch(
        "feature/done", tracking_remote="upstream", decide=decider
    )

    assert not isinstance(outcome, (InvalidBranchName, BranchAlreadyExists))
    assert outcome.local_work.unpushed_commits is None
    assert outcome.local_work.has_work
    assert outcome.path == "cancelled"
    assert decider.offered == [("save", "discard", "cancel")]
    assert git.mutations == []


def test_discard_stops_before_delete_when_base_has_local_commits() -> None:
    git = FakeGit(
        current_branch="feature/wip",
        commit_hashes={"upstream/feature/wip": STALE_SHA},
        ahead_counts={("feature/wip", "upstream/feature/wip"): 1},
        left_right_counts={("upstream/dev", "dev"): (0, 2)},
    )

    outcome = _manager(git).retire_branch(
        "feature/wip", tracking_remote="upstream", decide=_Decider(DiscardWork())
    )

    assert not isinstance(outcome, (InvalidBranchName, BranchAlreadyExists))
    assert outcome.report.failure is not None
    assert outcome.report.failure.step == "sync dev with upstream/dev"
    assert "2 local commits" in outcome.report.failure.message
    assert outcome.report.pending == ("delete feature/wip",)
    assert git.deleted_branches == []
    assert git.hard_resets == []

def test_protected_branch_is_never_offered_discard() -> None:
    git = FakeGit(current_branch="dev", uncommitted=True)
    decider = _Decider(DiscardWork())

    outcome = _manager(git).retire_branch("dev", tracking_remote="origin", decide=decider)

    assert decider.offered == [("save", "cancel")]
    assert not isinstance(outcome, (InvalidBranchName, BranchAlreadyExists))
    assert outcome.path == "cancelled"
    assert git.deleted_branches == []


def test_save_renames_and_replays_only_new_commits() -> None:
    """Commits up to the old upstream are already merged; only later ones move."""
    git = FakeGit(
        current_branch="feature/old",
        upstream_ref="upstream/feature/old",
        commit_hashes={"upstream/feature/old": STALE_SHA},
        uncommitted=True,
    )

    outcome = _manager(git).retire_branch(
        "feature/old",
        tracking_remote="upstream",
        decide=_Decider(SaveWork(new_branch="feature/next")),
    )

    assert not isinstance(outcome, (InvalidBranchName, BranchAlreadyExists))
    assert outcome.path == "saved"
    assert outcome.new_branch == "feature/next"
    assert outcome.strategy == OntoRebase(old_base=STALE_SHA)
    assert git.renamed_branches == [("feature/old", "feature/next")]
    assert git.upstream_ref is None
    assert git.rebases == [("rebase --onto", "upstream/dev", STALE_SHA)]
    assert git.forced_branches == [("feature/old", "upstream/feature/old")]
    assert git.current_branch == "feature/next"
    assert outcome.report.completed == (
        "rename feature/old to feature/next",
        "clear stale upstream",
        "fetch upstream",
        "rebase feature/next onto upstream/dev",
        "reset feature/old to upstream/feature/old",
    )


def test_save_skips_restore_when_remote_copy_is_gone() -> None:
    git = FakeGit(current_branch="feature/old", uncommitted=True)

    report, _ = _manager(git).save_work("feature/old", "feature/next", "upstream")

    assert report.ok
    assert git.forced_branches == []


def test_save_reports_pending_steps_on_rebase_conflict() -> None:
    git = FakeGit(
        current_branch="feature/old",
        upstream_ref="upstream/feature/old",
        commit_hashes={"upstream/feature/old": STALE_SHA},
        rebase_result=RebaseResult(success=False, conflict_files=("a.py", "b.py")),
    )

    report, _ = _manager(git).save_work("feature/old", "feature/next", "upstream")

    assert not report.ok
    assert report.failure is not None
    assert report.failure.message == "rebase stopped on conflicts in a.py, b.py"
    assert report.pending == ("reset feature/old to upstream/feature/old",)
    assert report.rebase is not None


def test_save_rejects_existing_branch_name_before_mutating() -> None:
    git = FakeGit(
        current_branch="feature/old",
        uncommitted=True,
        commit_hashes={"refs/heads/feature/taken": "abc"},
    )

    outcome = _manager(git).retire_branch(
        "feature/old",
        tracking_remote="upstream",
        decide=_Decider(SaveWork(new_branch="feature/taken")),
    )

    assert isinstance(outcome, BranchAlreadyExists)
    assert git.mutations == []


def test_save_rejects_invalid_branch_name() -> None:
    git = FakeGit(current_branch="feature/old", uncommitted=True)

    outcome = _manager(git).retire_branch(
        "feature/old",
        tracking_remote="upstream",
        decide=_Decider(SaveWork(new_branch="bad..name")),
    )

    assert isinstance(outcome, InvalidBranchName)


def test_update_local_branch_resets_checked_out_branch() -> None:
    git = FakeGit(current_branch="dev")

    _manager(git).update_local_branch("dev", "upstream/dev")

    assert git.hard_resets == ["upstream/dev"]
    assert git.forced_branches == []


def test_update_local_branch_moves_other_branch_ref() -> None:
    git = FakeGit(current_branch="feature/a")

    _manager(git).update_local_branch("dev", "upstream/dev")

    assert git.forced_branches == [("dev", "upstream/dev")]
    assert git.hard_resets == []


def test_update_local_branch_keeps_branch_with_local_commits() -> None:
    git = FakeGit(current_branch="feature/a", left_right_counts={("upstream/dev", "dev"): (0, 3)})

    result = _manager(git).update_local_branch("dev", "upstream/dev")

    assert result == LocalCommitsOnBranch(branch="dev", target="upstream/dev", count=3)
    assert git.forced_branches == []
    assert git.hard_resets == []


def test_update_local_branch_fast_forwards_branch_that_is_only_behind() -> None:
    git = FakeGit(current_branch="dev", left_right_counts={("upstream/dev", "dev"): (4, 0)})

    result = _manager(git).update_local_branch("dev", "upstream/dev")

    assert isinstance(result, GitCommandSucceeded)
    assert git.hard_resets == ["upstream/dev"]

def test_move_commits_to_new_branch() -> None:
    git = FakeGit(current_branch="dev")

    report = _manager(git).move_commits_to_new_branch("dev", "feature/rescued", "upstream/dev")

    assert not isinstance(report, (InvalidBranchName, BranchAlreadyExists))
    assert report.ok
    assert git.renamed_branches == [("dev", "feature/rescued")]
    assert git.forced_branches == [("dev", "upstream/dev")]
    assert git.current_branch == "dev"


def test_run_steps_stops_at_first_failure() -> None:
    failed = GitCommandFailed(operation="checkout dev", stderr="nope", returncode=1)
    ran: list[str] = []

    def step(name: str, result: GitCommandSucceeded | GitCommandFailed):
        def action() -> GitCommandSucceeded | GitCommandFailed:
            ran.append(name)
            return result

        return (name, action)

    report = run_steps(
        [
            step("one", GitCommandSucceeded()),
            step("two", failed),
            step("three", GitCommandSucceeded()),
        ]
    )

    assert ran == ["one", "two"]
    assert report.completed == ("one",)
    assert report.failure is not None
    assert report.failure.step == "two"
    assert report.failure.message == "Failed to checkout dev: nope"
    assert report.pending == ("three",)
